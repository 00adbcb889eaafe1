#!/usr/bin/env python3

"""
  Analysis task base class for the jet-hadron analysis: output directory,
  configuration, selection utilities, histogram registry and the mixing
  machinery shared by the detector-level and particle-level tasks.
"""

import os
import time

# Analysis utilities
from pyjethadron.mputils import pinfo, set_debug_level, debug_level
from pyjethadron.mixing import EventBinner, MixingCache, PairGenerator
from pyjethadron.process.base import common_base
from pyjethadron.process.base import process_utils
from pyjethadron.process.base import histogram_registry
from pyjethadron.process.base.settings import AnalysisSettings, load_settings

################################################################
class ProcessBase(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, input_file='', config_file='', output_dir='', debug_level=0, settings=None, **kwargs):
    super(ProcessBase, self).__init__(**kwargs)
    self.input_file = input_file
    self.config_file = config_file
    self.output_dir = output_dir
    self.debug_level = debug_level # (0 = no debug info, 1 = some debug info, 2 = all debug info)
    self.settings = settings
    self.start_time = time.time()

    # Create output dir
    if not self.output_dir.endswith("/"):
      self.output_dir = self.output_dir + "/"
    if not os.path.exists(self.output_dir):
      os.makedirs(self.output_dir)

    self.registry = histogram_registry.HistogramRegistry(name='registry')
    self.pair_generator = None

  #---------------------------------------------------------------
  # Initialize config file (or settings given to the constructor)
  #---------------------------------------------------------------
  def initialize_config(self):

    if self.settings is None:
      if self.config_file:
        self.settings = load_settings(self.config_file)
      else:
        self.settings = AnalysisSettings(name='settings').validate()
    if self.debug_level > debug_level():
      set_debug_level(self.debug_level)

    self.event_number_max = self.settings.event_number_max
    self.utils = process_utils.ProcessUtils(settings=self.settings)

  #---------------------------------------------------------------
  # Mixing pools on (vertex z, multiplicity or centrality).
  # Reconstructed collisions use the configured centrality estimator and
  # the global track multiplicity; mc collisions their FT0M centrality and
  # FT0A multiplicity.
  #---------------------------------------------------------------
  def initialize_mixing(self, particle_level=False):

    s = self.settings
    if s.mixingObservable == 'centrality':
      if particle_level:
        secondary_value = lambda mc_collision: mc_collision.centrality()
      else:
        secondary_value = lambda collision: collision.centrality(s.cfgCentEstimator)
    else:
      secondary_value = lambda collision: collision.multiplicity()

    binner = EventBinner(s.binsZVtx, s.mixing_edges(), secondary_value)
    cache = MixingCache(s.numberEventsMixed)
    self.pair_generator = PairGenerator(binner, cache)
    pinfo('event mixing: {} z bins x {} {} bins, {} events per pool'.format(
      binner.n_z_bins(), binner.n_secondary_bins(), s.mixingObservable, cache.number_events_mixed))
    return binner.n_bins()

  #---------------------------------------------------------------
  # Fill one bin of each counter histogram, with its weight
  #---------------------------------------------------------------
  def count(self, counters, step):
    for name, weight in counters:
      self.registry.fill(name, step + 0.5, weight=weight)

  def set_bin_labels(self, name, labels):
    for i, label in enumerate(labels):
      self.registry.set_bin_label(name, i+1, label)

  def print_time(self):
    print('--- {} seconds ---'.format(time.time() - self.start_time))

  #---------------------------------------------------------------
  # Save all histograms
  #---------------------------------------------------------------
  def save_output_objects(self):
    self.registry.write(self.output_dir)
