#!/usr/bin/env python3

"""
  Jet-hadron analysis of reconstructed collisions (data and detector-level MC).

  Reads event, jet, track (and D0 candidate) tables, and fills, for the
  process functions enabled in the config:
    collisions, collisionsWeighted    event counters and event QA
    qc, qcWeighted                    track QA
    spectra, spectraWeighted          jet spectra (pTHat outlier rejection)
    spectraAreaSub                    rho-area subtracted jet spectra
    jetHadron, mixJetHadron           jet-hadron correlations
    leadingJetHadron,
    mixLeadingJetHadron               leading-jet-hadron correlations of dijets
    hfJet                             D0-jet correlations
"""

import os
import sys
import argparse
import time

from tqdm import tqdm

# Analysis utilities
from pyjethadron.correlation import LeadingJetHadronFiller, JetHadronFiller, D0JetFiller
from pyjethadron.mputils import pinfo, pdebug
from pyjethadron.process.base import process_base
from pyjethadron.process.base import process_io
from pyjethadron.process.base.histogram_registry import CENTRALITY_AXIS, TRACK_PT_AXIS, ETA_AXIS, \
  PHI_AXIS, JET_PT_AXIS, JET_PT_SUB_AXIS

COLLISION_LABELS = ['allColl', 'eventSelection', 'occupancycut']

################################################################
class ProcessJetHadronData(process_base.ProcessBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, input_file='', config_file='', output_dir='', debug_level=0, **kwargs):
    super(ProcessJetHadronData, self).__init__(input_file, config_file, output_dir, debug_level, **kwargs)

    # Initialize configuration
    self.initialize_config()

  #---------------------------------------------------------------
  # Main processing function
  #---------------------------------------------------------------
  def process_data(self):

    self.start_time = time.time()

    io = process_io.ProcessIO(input_file=self.input_file, event_number_max=self.event_number_max)
    events = io.load_events(load_d0=self.settings.is_enabled('hfJet'))
    self.print_time()

    self.analyze_events(events)

    print('Save histograms...')
    self.save_output_objects()
    self.print_time()

  #---------------------------------------------------------------
  # Initialize histograms and fillers of the enabled process functions
  #---------------------------------------------------------------
  def initialize_output_objects(self):

    s = self.settings
    r = self.registry

    if s.is_enabled('collisions') or s.is_enabled('collisionsWeighted'):
      r.add('h_collisions', 'event status;event status; entries', [(4, 0.0, 4.0)])
      self.set_bin_labels('h_collisions', COLLISION_LABELS)
      r.add('h2_centrality_occupancy', 'centrality vs occupancy; centrality; occupancy', [CENTRALITY_AXIS, (60, 0, 30000)])
      r.add('h_collisions_Zvertex', 'position of collision; #it{Z} (cm)', [(300, -15.0, 15.0)])
      r.add('h_collisions_multFT0M', 'multiplicity using multFT0M; entries', [(3000, 0, 10000)])
    if s.is_enabled('collisionsWeighted'):
      r.add('h_collisions_weighted', 'event status;event status;entries', [(4, 0.0, 4.0)])
      self.set_bin_labels('h_collisions_weighted', COLLISION_LABELS)
      r.add('h_fakecollisions', 'event status;event status; entries', [(4, 0.0, 4.0)])

    if s.is_enabled('qc') or s.is_enabled('qcWeighted'):
      r.add('h_track_pt', 'track #it{p}_{T} ; #it{p}_{T,track} (GeV/#it{c})', [TRACK_PT_AXIS])
      r.add('h2_track_eta_track_phi', 'track eta vs. track phi; #eta; #phi; counts', [ETA_AXIS, PHI_AXIS])

    if s.is_enabled('spectra') or s.is_enabled('spectraWeighted'):
      r.add('h_jet_pt', 'jet pT; #it{p}_{T,jet} (GeV/#it{c}); counts', [JET_PT_AXIS])
      r.add('h_jet_eta', 'jet eta; #eta_{jet}; counts', [ETA_AXIS])
      r.add('h_jet_phi', 'jet phi; #phi_{jet}; counts', [PHI_AXIS])
      r.add('h_jet_area', 'jet Area_{jet}; Area_{jet}; counts', [(150, 0., 1.5)])
      r.add('h_jet_ntracks', 'jet N_{jet tracks}; N_{jet, tracks}; counts', [(200, -0.5, 199.5)])
      r.add('h2_jet_pt_track_pt', 'jet #it{p}_{T,jet} vs. #it{p}_{T,track}; #it{p}_{T,jet} (GeV/#it{c}); #it{p}_{T,track} (GeV/#it{c})',
            [JET_PT_AXIS, TRACK_PT_AXIS])
    if s.is_enabled('spectraWeighted'):
      r.add('h_jet_phat', 'jet #hat{p};#hat{p} (GeV/#it{c});entries', [(1000, 0, 1000)])
      r.add('h_jet_phat_weighted', 'jet #hat{p};#hat{p} (GeV/#it{c});entries', [(1000, 0, 1000)])

    if s.is_enabled('spectraAreaSub'):
      r.add('h_jet_pt_rhoareasubtracted', 'jet pt; #it{p}_{T,jet} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])
      r.add('h_jet_eta_rhoareasubtracted', 'jet eta; #eta_{jet}; counts', [ETA_AXIS])
      r.add('h_jet_phi_rhoareasubtracted', 'jet phi; #phi_{jet}; counts', [PHI_AXIS])
      r.add('h_jet_area_rhoareasubtracted', 'jet Area_{jet}; Area_{jet}; counts', [(150, 0., 1.5)])
      r.add('h_jet_ntracks_rhoareasubtracted', 'jet N_{jet tracks}; N_{jet, tracks}; counts', [(200, -0.5, 199.5)])

    n_pool_bins = 10
    if s.is_enabled('mixJetHadron') or s.is_enabled('mixLeadingJetHadron'):
      n_pool_bins = self.initialize_mixing()
      r.add('h_collisions_mult', 'multiplicity global tracks; entries', [(1000, 0, 1000)])

    self.jet_hadron = None
    self.mix_jet_hadron = None
    self.leading_jet_hadron = None
    self.mix_leading_jet_hadron = None
    self.d0_jet = None
    if s.is_enabled('jetHadron'):
      self.jet_hadron = JetHadronFiller(r, self.utils)
    if s.is_enabled('mixJetHadron'):
      self.mix_jet_hadron = JetHadronFiller(r, self.utils, mixed=True)
    if s.is_enabled('leadingJetHadron'):
      self.leading_jet_hadron = LeadingJetHadronFiller(r, self.utils)
    if s.is_enabled('mixLeadingJetHadron'):
      self.mix_leading_jet_hadron = LeadingJetHadronFiller(r, self.utils, mixed=True, n_pool_bins=n_pool_bins)
    if s.is_enabled('hfJet'):
      self.d0_jet = D0JetFiller(r, self.utils)

  #---------------------------------------------------------------
  # Main function to loop through and analyze events
  #---------------------------------------------------------------
  def analyze_events(self, events):

    self.initialize_output_objects()

    print('Analyze events...')
    for i, event in enumerate(tqdm(events)):
      if i >= self.event_number_max:
        break
      self.analyze_event(event)

    if self.mix_leading_jet_hadron is not None:
      self.mix_leading_jet_hadron.finalize()
    if self.pair_generator is not None:
      pinfo('events outside the mixing bins: {}'.format(self.pair_generator.n_unbinned))
    self.print_time()

  #---------------------------------------------------------------
  # Analyze a single event
  #---------------------------------------------------------------
  def analyze_event(self, event):

    s = self.settings
    collision = event.collision
    selected = self.utils.select_collision(collision)
    tracks = [track for track in event.tracks if self.utils.passes_track_filter(track)]

    # weighted track QC cuts on the vertex only, not on centrality
    if s.is_enabled('qcWeighted') and selected and self.utils.passes_vertex_cut(collision):
      self.fill_track_histograms(tracks, collision.weight)

    if not self.utils.passes_event_filter(collision):
      return

    good_occupancy = self.utils.is_good_occupancy(collision)

    if s.is_enabled('collisions'):
      self.fill_collision_histograms(collision, selected, good_occupancy)
    if s.is_enabled('collisionsWeighted'):
      self.fill_collision_histograms(collision, selected, good_occupancy, weighted=True)

    if not (selected and good_occupancy):
      pdebug('event {} rejected'.format(collision.key()), level=2)
      return

    if s.is_enabled('qc'):
      self.fill_track_histograms(tracks)
    if s.is_enabled('spectra'):
      for jet in event.jets:
        if self.utils.is_selected_jet(jet):
          self.fill_jet_histograms(jet)
    if s.is_enabled('spectraWeighted'):
      self.fill_weighted_jet_histograms(event.jets)
    if s.is_enabled('spectraAreaSub'):
      for jet in event.jets:
        if self.utils.is_selected_jet(jet):
          self.fill_jet_area_sub_histograms(jet, collision.rho)

    if self.jet_hadron is not None:
      self.jet_hadron.fill_correlations(collision.rho, event.jets, tracks)
    if self.leading_jet_hadron is not None:
      self.leading_jet_hadron.fill_correlations(collision.rho, event.jets, tracks, centrality=collision.centrality(s.cfgCentEstimator))
    if self.d0_jet is not None:
      self.d0_jet.fill_correlations(collision.rho, event.jets, event.d0_candidates)

    if self.pair_generator is not None:
      self.registry.fill('h_collisions_mult', collision.mult_ntracks_global)
      self.mix_event(collision, event.jets, tracks)

  #---------------------------------------------------------------
  # Correlate the jets of this event with the hadrons of the previous
  # events of its mixing pool, then add the event to the pool
  #---------------------------------------------------------------
  def mix_event(self, collision, jets, tracks):
    for pair in self.pair_generator.process(collision, jets, tracks):
      if self.mix_leading_jet_hadron is not None:
        self.mix_leading_jet_hadron.fill_correlations(pair.event.rho, pair.jets, pair.cached_hadrons,
                                                      pool_bin=pair.pool_bin)
      if self.mix_jet_hadron is not None:
        self.mix_jet_hadron.fill_correlations(pair.event.rho, pair.jets, pair.cached_hadrons)

  #---------------------------------------------------------------
  # Event counters: all, event selection, occupancy
  #---------------------------------------------------------------
  def fill_collision_histograms(self, collision, selected, good_occupancy, weighted=False):

    counters = [('h_collisions', 1.)]
    if weighted:
      counters.append(('h_collisions_weighted', collision.weight))
      if not collision.has_mc_collision():
        self.registry.fill('h_fakecollisions', 0.5)

    self.count(counters, 0)
    if not selected:
      return
    self.count(counters, 1)
    if not good_occupancy:
      return
    self.count(counters, 2)

    weight = collision.weight if weighted else 1.
    self.registry.fill('h2_centrality_occupancy', collision.cent_ft0m, collision.occupancy)
    self.registry.fill('h_collisions_Zvertex', collision.pos_z, weight=weight)
    if not weighted:
      self.registry.fill('h_collisions_multFT0M', collision.mult_ft0m)

  def fill_track_histograms(self, tracks, weight=1.):
    for track in tracks:
      if not self.utils.select_track(track):
        continue
      self.registry.fill('h_track_pt', track.pt(), weight=weight)
      self.registry.fill('h2_track_eta_track_phi', track.eta(), track.phi(), weight=weight)

  #---------------------------------------------------------------
  # Jet spectra of the selected radius, pTHat outliers rejected
  #---------------------------------------------------------------
  def fill_jet_histograms(self, jet, weight=1.):
    if self.utils.is_pthat_outlier(jet, weight):
      return
    if self.utils.is_selected_radius(jet):
      self.registry.fill('h_jet_pt', jet.pt(), weight=weight)
      self.registry.fill('h_jet_eta', jet.eta(), weight=weight)
      self.registry.fill('h_jet_phi', jet.phi(), weight=weight)
      self.registry.fill('h_jet_area', jet.area(), weight=weight)
      self.registry.fill('h_jet_ntracks', len(jet.constituents()), weight=weight)
    for constituent in jet.constituents():
      self.registry.fill('h2_jet_pt_track_pt', jet.pt(), constituent.pt(), weight=weight)

  #---------------------------------------------------------------
  # Weighted jet spectra; the first jet above pTHatMaxMCD * pTHat ends
  # the event
  #---------------------------------------------------------------
  def fill_weighted_jet_histograms(self, jets):
    for jet in jets:
      if not self.utils.is_selected_jet(jet):
        continue
      jet_weight = jet.event_weight()
      pthat = self.utils.pthat(jet_weight)
      if jet.pt() > self.settings.pTHatMaxMCD * pthat:
        pdebug('pTHat outlier: jet pt {:.2f}, pTHat {:.2f}'.format(jet.pt(), pthat))
        return
      self.registry.fill('h_jet_phat', pthat)
      self.registry.fill('h_jet_phat_weighted', pthat, weight=jet_weight)
      self.fill_jet_histograms(jet, jet_weight)

  def fill_jet_area_sub_histograms(self, jet, rho, weight=1.):
    if self.utils.is_pthat_outlier(jet, weight):
      return
    if not self.utils.is_selected_radius(jet):
      return
    pt_corr = jet.pt_corr(rho)
    self.registry.fill('h_jet_pt_rhoareasubtracted', pt_corr, weight=weight)
    if pt_corr > 0:
      self.registry.fill('h_jet_eta_rhoareasubtracted', jet.eta(), weight=weight)
      self.registry.fill('h_jet_phi_rhoareasubtracted', jet.phi(), weight=weight)
      self.registry.fill('h_jet_area_rhoareasubtracted', jet.area(), weight=weight)
      self.registry.fill('h_jet_ntracks_rhoareasubtracted', len(jet.constituents()), weight=weight)

##################################################################
if __name__ == '__main__':
  # Define arguments
  parser = argparse.ArgumentParser(description='Process jet-hadron correlations in data')
  parser.add_argument('-f', '--inputFile', action='store',
                      type=str, metavar='inputFile',
                      default='AnalysisResults.root',
                      help='Path of ROOT file containing TTrees')
  parser.add_argument('-c', '--configFile', action='store',
                      type=str, metavar='configFile',
                      default='config/jethadron_config.yaml',
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

  analysis = ProcessJetHadronData(input_file=args.inputFile, config_file=args.configFile, output_dir=args.outputDir)
  analysis.process_data()
