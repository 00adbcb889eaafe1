#!/usr/bin/env python3

"""
  Jet-hadron analysis at MC particle level.

  Each mc collision is accepted through its associated reconstructed
  collisions (event selection, centrality, occupancy, split-collision
  policy). Process functions:
    spectraMCP, spectraMCPWeighted    particle-level jet spectra
    spectraAreaSubMCP                 rho-area subtracted particle-level jet spectra
    leadingJetHadronMCP,
    mixLeadingJetHadronMCP            leading-jet-particle correlations of dijets
"""

import os
import sys
import argparse
import time

from tqdm import tqdm

# Analysis utilities
from pyjethadron.correlation import LeadingJetHadronFiller
from pyjethadron.mputils import pinfo, pdebug
from pyjethadron.process.base import process_base
from pyjethadron.process.base import process_io
from pyjethadron.process.base.histogram_registry import CENTRALITY_AXIS, TRACK_PT_AXIS, ETA_AXIS, \
  PHI_AXIS, JET_PT_AXIS, JET_PT_SUB_AXIS

MC_COLLISION_LABELS = ['allMcColl', 'vertexZ', 'noRecoColl', 'recoEvtSel', 'centralitycut', 'occupancycut']
MC_COLLISION_LABELS_SPLIT = ['allMcColl', 'vertexZ', 'noRecoColl', 'splitColl', 'recoEvtSel', 'centralitycut', 'occupancycut']

# pTHat cut scan: jet pt < N * PTHAT_SCAN_STEP * pTHat, N = 1..PTHAT_SCAN_N
PTHAT_SCAN_N = 20
PTHAT_SCAN_STEP = 0.25

################################################################
class ProcessJetHadronMCP(process_base.ProcessBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, input_file='', config_file='', output_dir='', debug_level=0, **kwargs):
    super(ProcessJetHadronMCP, self).__init__(input_file, config_file, output_dir, debug_level, **kwargs)

    # Initialize configuration
    self.initialize_config()

  #---------------------------------------------------------------
  # Main processing function
  #---------------------------------------------------------------
  def process_mcp(self):

    self.start_time = time.time()

    io = process_io.ProcessIO(input_file=self.input_file, event_number_max=self.event_number_max)
    mc_events = io.load_mc_events()
    self.print_time()

    self.analyze_mc_events(mc_events)

    print('Save histograms...')
    self.save_output_objects()
    self.print_time()

  #---------------------------------------------------------------
  # Initialize histograms and fillers of the enabled process functions
  #---------------------------------------------------------------
  def initialize_output_objects(self):

    s = self.settings
    r = self.registry

    if s.is_enabled('spectraMCP') or s.is_enabled('spectraMCPWeighted'):
      r.add('h_mcColl_counts', 'number of mc events; event status; entries', [(10, 0, 10)])
      self.set_bin_labels('h_mcColl_counts', MC_COLLISION_LABELS)
      r.add('h_mc_zvertex', 'position of collision ;#it{Z} (cm)', [(300, -15.0, 15.0)])
      r.add('h_mc_mult', 'multiplicity FT0A; entries', [(3000, 0, 60000)])
      r.add('h_jet_pt_part', 'part jet pT;#it{p}_{T,jet}^{part} (GeV/#it{c}); counts', [JET_PT_AXIS])
      r.add('h_jet_eta_part', 'part jet #eta;#eta^{part}; counts', [ETA_AXIS])
      r.add('h_jet_phi_part', 'part jet #varphi;#phi^{part}; counts', [PHI_AXIS])
      r.add('h_jet_area_part', 'part jet Area_{jet}; Area_{jet}^{part}; counts', [(150, 0., 1.5)])
      r.add('h_jet_ntracks_part', 'part jet N_{jet tracks}; N_{jet, tracks}^{part}; counts', [(200, -0.5, 199.5)])
      r.add('h2_jet_pt_part_track_pt_part', 'part jet #it{p}_{T,jet} vs. #it{p}_{T,track}; #it{p}_{T,jet}^{part} (GeV/#it{c}); #it{p}_{T,track}^{part} (GeV/#it{c})',
            [JET_PT_SUB_AXIS, TRACK_PT_AXIS])
    if s.is_enabled('spectraMCPWeighted'):
      r.add('h_mcColl_counts_weight', 'number of weighted mc events; event status; entries', [(10, 0, 10)])
      self.set_bin_labels('h_mcColl_counts_weight', MC_COLLISION_LABELS)
      r.add('h2_jet_ptcut_part', 'p_{T} cut;p_{T,jet}^{part} (GeV/#it{c});N;entries', [(300, 0, 300), (20, 0, 5)])
      r.add('h_jet_phat_part_weighted', 'jet #hat{p};#hat{p} (GeV/#it{c});entries', [(1000, 0, 1000)])

    if self.uses_split_selection():
      r.add('h_mcColl_counts_areasub', 'number of mc events; event status; entries', [(10, 0, 10)])
      self.set_bin_labels('h_mcColl_counts_areasub', MC_COLLISION_LABELS_SPLIT)
    if s.is_enabled('spectraAreaSubMCP'):
      r.add('h_mcColl_rho', 'mc collision rho;#rho (GeV/#it{c}); counts', [(500, 0.0, 500.0)])
      r.add('h_mcColl_centrality', 'mc collision centrality; centrality; counts', [CENTRALITY_AXIS])
      r.add('h_jet_pt_part_rhoareasubtracted', 'part jet corr pT;#it{p}_{T,jet}^{part} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])
      r.add('h_jet_eta_part_rhoareasubtracted', 'part jet #eta;#eta^{part}; counts', [ETA_AXIS])
      r.add('h_jet_phi_part_rhoareasubtracted', 'part jet #varphi;#varphi^{part}; counts', [PHI_AXIS])
      r.add('h_jet_area_part_rhoareasubtracted', 'part jet Area_{jet}; Area_{jet}^{part}; counts', [(150, 0., 1.5)])
      r.add('h_jet_ntracks_part_rhoareasubtracted', 'part jet N_{jet tracks}; N_{jet, tracks}^{part}; counts', [(200, -0.5, 199.5)])

    self.leading_jet_hadron = None
    self.mix_leading_jet_hadron = None
    if s.is_enabled('leadingJetHadronMCP'):
      self.leading_jet_hadron = LeadingJetHadronFiller(r, self.utils, particle_level=True)
    if s.is_enabled('mixLeadingJetHadronMCP'):
      n_pool_bins = self.initialize_mixing(particle_level=True)
      self.mix_leading_jet_hadron = LeadingJetHadronFiller(r, self.utils, mixed=True, particle_level=True,
                                                           n_pool_bins=n_pool_bins)

  def uses_split_selection(self):
    s = self.settings
    return s.is_enabled('spectraAreaSubMCP') or s.is_enabled('leadingJetHadronMCP') \
      or s.is_enabled('mixLeadingJetHadronMCP')

  #---------------------------------------------------------------
  # Main function to loop through and analyze mc events
  #---------------------------------------------------------------
  def analyze_mc_events(self, mc_events):

    self.initialize_output_objects()

    print('Analyze mc events...')
    for i, mc_event in enumerate(tqdm(mc_events)):
      if i >= self.event_number_max:
        break
      self.analyze_mc_event(mc_event)

    if self.mix_leading_jet_hadron is not None:
      self.mix_leading_jet_hadron.finalize()
      pinfo('mc events outside the mixing bins: {}'.format(self.pair_generator.n_unbinned))
    self.print_time()

  #---------------------------------------------------------------
  # Analyze a single mc event
  #---------------------------------------------------------------
  def analyze_mc_event(self, mc_event):

    s = self.settings
    mc_collision = mc_event.mc_collision

    if s.is_enabled('spectraMCP'):
      if self.select_mc_collision(mc_event, [('h_mcColl_counts', 1.)]) is not None:
        self.registry.fill('h_mc_zvertex', mc_collision.pos_z)
        self.registry.fill('h_mc_mult', mc_collision.mult_ft0a)
        for jet in mc_event.jets:
          if self.utils.is_selected_jet(jet, particle_level=True):
            self.fill_mcp_jet_histograms(jet)

    if s.is_enabled('spectraMCPWeighted'):
      counters = [('h_mcColl_counts', 1.), ('h_mcColl_counts_weight', mc_collision.weight)]
      if self.select_mc_collision(mc_event, counters, check_centrality=False) is not None:
        self.fill_weighted_mcp_jet_histograms(mc_event.jets)

    if not self.uses_split_selection():
      return
    centrality = self.select_mc_collision(mc_event, [('h_mcColl_counts_areasub', 1.)], split_policy=True)
    if centrality is None:
      pdebug('mc event {} rejected'.format(mc_collision.key()), level=2)
      return

    if s.is_enabled('spectraAreaSubMCP'):
      self.registry.fill('h_mcColl_rho', mc_collision.rho)
      self.registry.fill('h_mcColl_centrality', centrality)
      for jet in mc_event.jets:
        if self.utils.is_selected_jet(jet, particle_level=True):
          self.fill_mcp_jet_area_sub_histograms(jet, mc_collision.rho)

    particles = [p for p in mc_event.particles if self.utils.passes_track_filter(p)]
    if self.leading_jet_hadron is not None:
      self.leading_jet_hadron.fill_correlations(mc_collision.rho, mc_event.jets, particles, centrality=centrality)
    if self.mix_leading_jet_hadron is not None:
      for pair in self.pair_generator.process(mc_collision, mc_event.jets, particles):
        self.mix_leading_jet_hadron.fill_correlations(pair.event.rho, pair.jets, pair.cached_hadrons,
                                                      pool_bin=pair.pool_bin)

  #---------------------------------------------------------------
  # Accept an mc collision through its reconstructed collisions.
  # Fill the counters step by step; return the centrality (FT0M) of the
  # last considered reconstructed collision, or None if rejected.
  #
  # split_policy applies acceptSplitCollisions:
  #   0 reject mc collisions with more than one reconstructed collision
  #   1 accept them, any reconstructed collision can pass the selection
  #   2 accept them, only the first reconstructed collision is used
  #---------------------------------------------------------------
  def select_mc_collision(self, mc_event, counters, split_policy=False, check_centrality=True):

    s = self.settings
    step = 0
    self.count(counters, step)
    if abs(mc_event.mc_collision.pos_z) > s.vertexZCut:
      return None
    step += 1
    self.count(counters, step)

    collisions = list(mc_event.collisions)
    if len(collisions) < 1:
      return None
    step += 1
    self.count(counters, step)

    if split_policy:
      if s.acceptSplitCollisions == 0 and len(collisions) > 1:
        return None
      step += 1
      self.count(counters, step)
      if s.acceptSplitCollisions == 2:
        collisions = collisions[:1]

    if not any(self.utils.select_collision(c) for c in collisions):
      return None
    step += 1
    self.count(counters, step)
    centrality = collisions[-1].cent_ft0m
    if not check_centrality:
      return centrality

    if not any(s.centralityMin < c.cent_ft0m < s.centralityMax for c in collisions):
      return None
    step += 1
    self.count(counters, step)

    occupancy_min = s.trackOccupancyInTimeRangeMin
    occupancy_max = s.trackOccupancyInTimeRangeMax
    if not any(occupancy_min < c.occupancy < occupancy_max for c in collisions):
      return None
    step += 1
    self.count(counters, step)
    return centrality

  #---------------------------------------------------------------
  # Particle-level jet spectra of the selected radius
  #---------------------------------------------------------------
  def fill_mcp_jet_histograms(self, jet, weight=1.):
    if self.utils.is_pthat_outlier(jet, weight, particle_level=True):
      return
    if self.utils.is_selected_radius(jet):
      self.registry.fill('h_jet_pt_part', jet.pt(), weight=weight)
      self.registry.fill('h_jet_eta_part', jet.eta(), weight=weight)
      self.registry.fill('h_jet_phi_part', jet.phi(), weight=weight)
      self.registry.fill('h_jet_area_part', jet.area(), weight=weight)
      self.registry.fill('h_jet_ntracks_part', len(jet.constituents()), weight=weight)
    for constituent in jet.constituents():
      self.registry.fill('h2_jet_pt_part_track_pt_part', jet.pt(), constituent.pt(), weight=weight)

  #---------------------------------------------------------------
  # Weighted spectra with the pTHat cut scan
  #---------------------------------------------------------------
  def fill_weighted_mcp_jet_histograms(self, jets):
    for jet in jets:
      if not self.utils.is_selected_jet(jet, particle_level=True):
        continue
      jet_weight = jet.event_weight()
      pthat = self.utils.pthat(jet_weight)
      if self.utils.is_selected_radius(jet):
        for n in range(1, PTHAT_SCAN_N + 1):
          if jet.pt() < n * PTHAT_SCAN_STEP * pthat:
            self.registry.fill('h2_jet_ptcut_part', jet.pt(), n * PTHAT_SCAN_STEP, weight=jet_weight)
      self.registry.fill('h_jet_phat_part_weighted', pthat, weight=jet_weight)
      self.fill_mcp_jet_histograms(jet, jet_weight)

  def fill_mcp_jet_area_sub_histograms(self, jet, rho, weight=1.):
    if self.utils.is_pthat_outlier(jet, weight, particle_level=True):
      return
    if not self.utils.is_selected_radius(jet):
      return
    pt_corr = jet.pt_corr(rho)
    self.registry.fill('h_jet_pt_part_rhoareasubtracted', pt_corr, weight=weight)
    if pt_corr > 0:
      self.registry.fill('h_jet_eta_part_rhoareasubtracted', jet.eta(), weight=weight)
      self.registry.fill('h_jet_phi_part_rhoareasubtracted', jet.phi(), weight=weight)
      self.registry.fill('h_jet_area_part_rhoareasubtracted', jet.area(), weight=weight)
      self.registry.fill('h_jet_ntracks_part_rhoareasubtracted', len(jet.constituents()), weight=weight)

##################################################################
if __name__ == '__main__':
  # Define arguments
  parser = argparse.ArgumentParser(description='Process jet-hadron correlations at MC particle level')
  parser.add_argument('-f', '--inputFile', action='store',
                      type=str, metavar='inputFile',
                      default='AnalysisResults.root',
                      help='Path of ROOT file containing TTrees')
  parser.add_argument('-c', '--configFile', action='store',
                      type=str, metavar='configFile',
                      default='config/jethadron_mcp_config.yaml',
                      help="Path of config file for analysis")
  parser.add_argument('-o', '--outputDir', action='store',
                      type=str, metavar='outputDir',
                      default='./TestOutput',
                      help='Output directory for output to be written to')

  # Parse the arguments
  args = parser.parse_args()

  print('Configuring...')
  print('inputFile: \'{0}\''.format(args.inputFile))
  print('configFile: \'{0}\''.format(args.configFile))
  print('ouputDir: \'{0}\''.format(args.outputDir))
  print('----------------------------------------------------------------')

  # If invalid inputFile is given, exit
  if not os.path.exists(args.inputFile):
    print('File \"{0}\" does not exist! Exiting!'.format(args.inputFile))
    sys.exit(0)

  # If invalid configFile is given, exit
  if not os.path.exists(args.configFile):
    print('File \"{0}\" does not exist! Exiting!'.format(args.configFile))
    sys.exit(0)

  analysis = ProcessJetHadronMCP(input_file=args.inputFile, config_file=args.configFile, output_dir=args.outputDir)
  analysis.process_mcp()
