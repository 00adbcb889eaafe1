#!/usr/bin/env python3

"""
  Configuration of the jet-hadron correlation task.

  AnalysisSettings carries every configurable with its default value; a yaml
  config file overrides any subset of them. Keys use the configurable names
  of the analysis task (vertexZCut, leadingjetptMin, numberEventsMixed, ...).
  Settings are read once at startup and not modified afterwards.
"""

import sys

import yaml

from pyjethadron.mputils import MPBase, pwarning, set_debug_level
from pyjethadron.process.base.event_info import CENTRALITY_ESTIMATORS

# Names of event selections that can be requested in eventSelections,
# mapped to their bit in the collision event_sel mask
EVENT_SELECTION_BITS = {
  'sel8': 0,
  'sel8Full': 1,
  'sel8FullPbPb': 2,
  'selMC': 3,
  'selMCFull': 4,
  'selUnanchoredMC': 5,
  'selNoSameBunchPileup': 6,
  'selIsGoodZvtxFT0vsPV': 7,
  'selNoCollInTimeRangeStandard': 8,
}

# Names of track selections that can be requested in trackSelections,
# mapped to their bit in the track track_sel mask
TRACK_SELECTION_BITS = {
  'globalTracks': 0,
  'QualityTracks': 1,
  'hybridTracks': 2,
  'uniformTracks': 3,
  'QualityTracksWDCA': 4,
}

MIXING_OBSERVABLES = ['multiplicity', 'centrality']

PROCESS_FUNCTIONS = [
  'collisions', 'collisionsWeighted', 'qc', 'qcWeighted',
  'spectra', 'spectraWeighted', 'spectraAreaSub',
  'jetHadron', 'mixJetHadron', 'leadingJetHadron', 'mixLeadingJetHadron', 'hfJet',
  'spectraMCP', 'spectraMCPWeighted', 'spectraAreaSubMCP',
  'leadingJetHadronMCP', 'mixLeadingJetHadronMCP',
]

################################################################
class AnalysisSettings(MPBase):
  def __init__(self, **kwargs):
    self.configure_from_args(
      # event selection
      eventSelections=['sel8'],
      vertexZCut=10.0,
      centralityMin=-999.0,
      centralityMax=999.0,
      cfgCentEstimator=0,
      trackOccupancyInTimeRangeMin=-999999,
      trackOccupancyInTimeRangeMax=999999,
      skipMBGapEvents=False,
      acceptSplitCollisions=0,
      # tracks
      trackSelections='globalTracks',
      trackEtaMin=-0.9,
      trackEtaMax=0.9,
      trackPtMin=0.15,
      trackPtMax=100.0,
      # jets
      selectedJetsRadius=0.4,
      jetEtaMin=-0.7,
      jetEtaMax=0.7,
      jetAreaFractionMin=-99.0,
      leadingConstituentPtMin=-99.0,
      leadingConstituentPtMax=9999.0,
      checkLeadConstituentPtForMcpJets=False,
      leadingjetptMin=20.0,
      subleadingjetptMin=10.0,
      # MC weights
      pTHatMaxMCD=999.0,
      pTHatMaxMCP=999.0,
      pTHatExponent=6.0,
      pTHatAbsoluteMin=-99.0,
      # event mixing
      numberEventsMixed=5,
      binsZVtx=[-10.0, -2.5, 2.5, 10.0],
      binsMultiplicity=[0.0, 15.0, 25.0, 35.0, 50.0],
      binsCentrality=[0.0, 10.0, 50.0, 100.0],
      mixingObservable='multiplicity',
      # job
      process=['collisions', 'leadingJetHadron', 'mixLeadingJetHadron'],
      debug_level=0,
      event_number_max=sys.maxsize)
    super(AnalysisSettings, self).__init__(**kwargs)

  #---------------------------------------------------------------
  # Bin edges of the secondary mixing axis
  #---------------------------------------------------------------
  def mixing_edges(self):
    if self.mixingObservable == 'centrality':
      return self.binsCentrality
    return self.binsMultiplicity

  def is_enabled(self, process_function):
    return process_function in self.process

  #---------------------------------------------------------------
  # Check values that would otherwise fail deep inside the event loop
  #---------------------------------------------------------------
  def validate(self):
    if int(self.numberEventsMixed) < 1:
      sys.exit('AnalysisSettings::validate: numberEventsMixed must be >= 1, got {}'.format(self.numberEventsMixed))
    for name in ['binsZVtx', 'binsMultiplicity', 'binsCentrality']:
      edges = getattr(self, name)
      if len(edges) < 2 or any(lo >= hi for lo, hi in zip(edges[:-1], edges[1:])):
        sys.exit('AnalysisSettings::validate: {} must be at least two increasing edges, got {}'.format(name, edges))
    if self.acceptSplitCollisions not in (0, 1, 2):
      sys.exit('AnalysisSettings::validate: acceptSplitCollisions must be 0, 1 or 2')
    if self.cfgCentEstimator not in CENTRALITY_ESTIMATORS:
      sys.exit('AnalysisSettings::validate: cfgCentEstimator must be 0 (FT0C), 1 (FT0A) or 2 (FT0M)')
    if self.mixingObservable not in MIXING_OBSERVABLES:
      sys.exit('AnalysisSettings::validate: mixingObservable must be one of {}'.format(MIXING_OBSERVABLES))
    if isinstance(self.eventSelections, str):
      self.eventSelections = [s for s in self.eventSelections.split('+') if s]
    for sel in self.eventSelections:
      if sel not in EVENT_SELECTION_BITS:
        sys.exit('AnalysisSettings::validate: unknown event selection {}'.format(sel))
    if self.trackSelections not in TRACK_SELECTION_BITS:
      sys.exit('AnalysisSettings::validate: unknown track selection {}'.format(self.trackSelections))
    for p in self.process:
      if p not in PROCESS_FUNCTIONS:
        sys.exit('AnalysisSettings::validate: unknown process function {}'.format(p))
    return self

#---------------------------------------------------------------
# Read a yaml config file into AnalysisSettings
#---------------------------------------------------------------
def load_settings(config_file):

  with open(config_file, 'r') as stream:
    config = yaml.safe_load(stream)
  if config is None:
    config = {}
  if not isinstance(config, dict):
    sys.exit('load_settings: config file {} does not contain a mapping'.format(config_file))

  settings = AnalysisSettings(name='settings')
  known = set(settings.__dict__.keys())
  for key in config:
    if key not in known:
      pwarning('load_settings: unknown config key {} ignored'.format(key))
  settings.configure_from_dict({k: v for k, v in config.items() if k in known and k != 'name'})
  if settings.event_number_max is None:
    settings.event_number_max = sys.maxsize

  set_debug_level(settings.debug_level)
  return settings.validate()
