#!/usr/bin/env python3

"""
  Per-event objects handed to the jet-hadron analysis: collisions
  (detector and particle level), jets, tracks, particles and D0 candidates.

  The kinematic objects follow the fastjet PseudoJet accessor convention
  (jet.pt(), jet.eta(), jet.phi(), ...), so the same selection and
  correlation code runs on data, detector-level and particle-level input.
  All objects are read-only after construction.
"""

# Centrality estimators, indexed by cfgCentEstimator
CENT_FT0C = 0
CENT_FT0A = 1
CENT_FT0M = 2
CENTRALITY_ESTIMATORS = {CENT_FT0C: 'FT0C', CENT_FT0A: 'FT0A', CENT_FT0M: 'FT0M'}

################################################################
class Kinematics(object):
  __slots__ = ('_pt', '_eta', '_phi', '_index')

  def __init__(self, pt, eta, phi, index=-1):
    self._pt = float(pt)
    self._eta = float(eta)
    self._phi = float(phi)
    self._index = int(index)

  def pt(self):
    return self._pt

  def eta(self):
    return self._eta

  def phi(self):
    return self._phi

  def index(self):
    return self._index

  def __repr__(self):
    return '{}(pt={:.3f}, eta={:.3f}, phi={:.3f})'.format(
      self.__class__.__name__, self._pt, self._eta, self._phi)

################################################################
# Reconstructed track, with the track selection bit mask
class Track(Kinematics):
  __slots__ = ('_track_sel',)

  def __init__(self, pt, eta, phi, index=-1, track_sel=0):
    super(Track, self).__init__(pt, eta, phi, index)
    self._track_sel = int(track_sel)

  def track_sel(self):
    return self._track_sel

################################################################
# Generator-level charged particle (no selection bits)
class Particle(Kinematics):
  __slots__ = ()

################################################################
class D0Candidate(Kinematics):
  __slots__ = ('_m',)

  def __init__(self, pt, eta, phi, m, index=-1):
    super(D0Candidate, self).__init__(pt, eta, phi, index)
    self._m = float(m)

  def m(self):
    return self._m

################################################################
# Jet with area, resolution parameter (R x 100) and resolved constituents
class Jet(Kinematics):
  __slots__ = ('_area', '_r', '_constituents', '_event_weight')

  def __init__(self, pt, eta, phi, area, r, constituents=(), index=-1, event_weight=1.0):
    super(Jet, self).__init__(pt, eta, phi, index)
    self._area = float(area)
    self._r = int(round(r))
    self._constituents = tuple(constituents)
    self._event_weight = float(event_weight)

  def area(self):
    return self._area

  def r(self):
    return self._r

  def constituents(self):
    return self._constituents

  def event_weight(self):
    return self._event_weight

  #---------------------------------------------------------------
  # Rho-area subtracted transverse momentum
  #---------------------------------------------------------------
  def pt_corr(self, rho):
    return self._pt - rho * self._area

################################################################
# Reconstructed collision (data and detector-level MC)
class Collision(object):
  __slots__ = ('run_number', 'ev_id', 'pos_z', 'cent_ft0c', 'cent_ft0a', 'cent_ft0m',
               'mult_ft0m', 'mult_ntracks_global', 'occupancy', 'rho', 'weight',
               'event_sel', 'is_mb_gap', 'mc_collision_id')

  def __init__(self, run_number=0, ev_id=0, pos_z=0., cent_ft0c=-1., cent_ft0a=-1., cent_ft0m=-1.,
               mult_ft0m=0., mult_ntracks_global=0, occupancy=0, rho=0., weight=1.,
               event_sel=0, is_mb_gap=False, mc_collision_id=-1):
    self.run_number = int(run_number)
    self.ev_id = int(ev_id)
    self.pos_z = float(pos_z)
    self.cent_ft0c = float(cent_ft0c)
    self.cent_ft0a = float(cent_ft0a)
    self.cent_ft0m = float(cent_ft0m)
    self.mult_ft0m = float(mult_ft0m)
    self.mult_ntracks_global = int(mult_ntracks_global)
    self.occupancy = int(occupancy)
    self.rho = float(rho)
    self.weight = float(weight)
    self.event_sel = int(event_sel)
    self.is_mb_gap = bool(is_mb_gap)
    self.mc_collision_id = int(mc_collision_id)

  def key(self):
    return (self.run_number, self.ev_id)

  def centrality(self, estimator=CENT_FT0M):
    if estimator == CENT_FT0C:
      return self.cent_ft0c
    if estimator == CENT_FT0A:
      return self.cent_ft0a
    return self.cent_ft0m

  def multiplicity(self):
    return self.mult_ntracks_global

  def has_mc_collision(self):
    return self.mc_collision_id >= 0

  def __repr__(self):
    return 'Collision(run={}, ev={}, posZ={:.2f})'.format(self.run_number, self.ev_id, self.pos_z)

################################################################
# Generator-level collision. Occupancy, selection bits and the per-estimator
# centralities only exist for the associated reconstructed collisions.
class McCollision(object):
  __slots__ = ('run_number', 'ev_id', 'pos_z', 'cent_ft0m', 'mult_ft0a', 'rho', 'weight')

  def __init__(self, run_number=0, ev_id=0, pos_z=0., cent_ft0m=-1., mult_ft0a=0., rho=0., weight=1.):
    self.run_number = int(run_number)
    self.ev_id = int(ev_id)
    self.pos_z = float(pos_z)
    self.cent_ft0m = float(cent_ft0m)
    self.mult_ft0a = float(mult_ft0a)
    self.rho = float(rho)
    self.weight = float(weight)

  def key(self):
    return (self.run_number, self.ev_id)

  def centrality(self):
    return self.cent_ft0m

  def multiplicity(self):
    return self.mult_ft0a

  def __repr__(self):
    return 'McCollision(run={}, ev={}, posZ={:.2f})'.format(self.run_number, self.ev_id, self.pos_z)

################################################################
class EventRecord(object):
  __slots__ = ('collision', 'jets', 'tracks', 'd0_candidates')

  def __init__(self, collision, jets=(), tracks=(), d0_candidates=()):
    self.collision = collision
    self.jets = tuple(jets)
    self.tracks = tuple(tracks)
    self.d0_candidates = tuple(d0_candidates)

################################################################
class McEventRecord(object):
  __slots__ = ('mc_collision', 'collisions', 'jets', 'particles')

  def __init__(self, mc_collision, collisions=(), jets=(), particles=()):
    self.mc_collision = mc_collision
    self.collisions = tuple(collisions)
    self.jets = tuple(jets)
    self.particles = tuple(particles)
