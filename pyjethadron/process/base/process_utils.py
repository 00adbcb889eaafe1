#!/usr/bin/env python3

"""
  Selection utilities for the jet-hadron analysis: collision, track and
  jet acceptance, pTHat outlier rejection.

  All predicates are pure functions of the object and the (immutable)
  analysis settings.
"""

import math

import numpy as np

# Base class
from pyjethadron.process.base import common_base
from pyjethadron.process.base.settings import EVENT_SELECTION_BITS, TRACK_SELECTION_BITS

# Values at or beyond these leave the corresponding jet cut disabled
CUT_DISABLED_MIN = -98.0
CUT_DISABLED_MAX = 9998.0

################################################################
class ProcessUtils(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, settings=None, **kwargs):
    super(ProcessUtils, self).__init__(**kwargs)
    self.settings = settings
    self.event_selection_mask = 0
    for sel in settings.eventSelections:
      self.event_selection_mask |= (1 << EVENT_SELECTION_BITS[sel])
    self.track_selection_bit = TRACK_SELECTION_BITS[settings.trackSelections]
    self.selected_radius = int(round(settings.selectedJetsRadius * 100.))

  #---------------------------------------------------------------
  # Check the requested event selection bits (and MB gap rejection)
  #---------------------------------------------------------------
  def select_collision(self, collision):
    if self.settings.skipMBGapEvents and collision.is_mb_gap:
      return False
    return (collision.event_sel & self.event_selection_mask) == self.event_selection_mask

  def is_good_occupancy(self, collision):
    if collision.occupancy < self.settings.trackOccupancyInTimeRangeMin:
      return False
    if collision.occupancy > self.settings.trackOccupancyInTimeRangeMax:
      return False
    return True

  #---------------------------------------------------------------
  # Vertex and centrality filter applied to reconstructed collisions
  #---------------------------------------------------------------
  def passes_vertex_cut(self, collision):
    return abs(collision.pos_z) < self.settings.vertexZCut

  def passes_event_filter(self, collision):
    s = self.settings
    if not self.passes_vertex_cut(collision):
      return False
    return s.centralityMin <= collision.cent_ft0m < s.centralityMax

  #---------------------------------------------------------------
  # Full event selection used by the correlation process functions
  #---------------------------------------------------------------
  def is_good_collision(self, collision):
    return self.passes_event_filter(collision) and self.select_collision(collision) \
      and self.is_good_occupancy(collision)

  #---------------------------------------------------------------
  # Kinematic track filter applied before any track enters the analysis
  #---------------------------------------------------------------
  def passes_track_filter(self, track):
    s = self.settings
    return s.trackPtMin <= track.pt() < s.trackPtMax and s.trackEtaMin < track.eta() < s.trackEtaMax

  def select_track(self, track):
    return bool(track.track_sel() & (1 << self.track_selection_bit))

  #---------------------------------------------------------------
  # Jet eta acceptance: fiducial in the track acceptance if no explicit
  # jet eta window is configured
  #---------------------------------------------------------------
  def is_in_eta_acceptance(self, jet):
    s = self.settings
    if s.jetEtaMin < CUT_DISABLED_MIN:
      jet_r = jet.r() / 100.
      return s.trackEtaMin + jet_r <= jet.eta() <= s.trackEtaMax - jet_r
    return s.jetEtaMin <= jet.eta() <= s.jetEtaMax

  #---------------------------------------------------------------
  # Jet area-fraction and leading-constituent pt window
  #---------------------------------------------------------------
  def is_accepted_jet(self, jet, particle_level=False):
    s = self.settings

    if s.jetAreaFractionMin > CUT_DISABLED_MIN:
      jet_r = jet.r() / 100.
      if jet.area() < s.jetAreaFractionMin * np.pi * jet_r * jet_r:
        return False

    check_min = s.leadingConstituentPtMin > CUT_DISABLED_MIN
    check_max = s.leadingConstituentPtMax < CUT_DISABLED_MAX
    if not check_min and not check_max:
      return True
    if particle_level and not s.checkLeadConstituentPtForMcpJets:
      return True

    has_min_constituent = not check_min
    for constituent in jet.constituents():
      if check_min and constituent.pt() >= s.leadingConstituentPtMin:
        has_min_constituent = True
      if check_max and constituent.pt() > s.leadingConstituentPtMax:
        return False
    return has_min_constituent

  def is_selected_jet(self, jet, particle_level=False):
    return self.is_in_eta_acceptance(jet) and self.is_accepted_jet(jet, particle_level)

  def is_selected_radius(self, jet):
    return jet.r() == self.selected_radius

  #---------------------------------------------------------------
  # pTHat estimated from the MC event weight
  #---------------------------------------------------------------
  def pthat(self, weight):
    if weight <= 0.:
      return math.inf
    return 10. / math.pow(weight, 1. / self.settings.pTHatExponent)

  def is_pthat_outlier(self, jet, weight, particle_level=False):
    pthat = self.pthat(weight)
    pthat_max = self.settings.pTHatMaxMCP if particle_level else self.settings.pTHatMaxMCD
    return jet.pt() > pthat_max * pthat or pthat < self.settings.pTHatAbsoluteMin

