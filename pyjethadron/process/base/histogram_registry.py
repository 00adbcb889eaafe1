#!/usr/bin/env python3

"""
  Histogram registry: the only output of the jet-hadron analysis.

  Histograms are registered once by name (title + regular axes) and then
  filled append-only with (values, weight). Histograms with up to three
  axes are dense hist.Hist objects with weight storage and are written to
  a ROOT file with uproot. Higher-dimensional correlation histograms only
  keep their filled bins (SparseHist) and are pickled next to it, together
  with the titles and bin labels.
"""

import os
import pickle
import sys

import hist
import uproot

from pyjethadron.mputils import MPBase, pinfo, pwarning

# Histograms with more axes than this are sparse
MAX_DENSE_DIM = 3

################################################################
# Regular axis: number of bins, lower edge, upper edge, title
class AxisSpec(object):
  __slots__ = ('nbins', 'xmin', 'xmax', 'title')

  def __init__(self, nbins, xmin, xmax, title=''):
    self.nbins = int(nbins)
    self.xmin = float(xmin)
    self.xmax = float(xmax)
    self.title = title

  def make_axis(self, name):
    return hist.axis.Regular(self.nbins, self.xmin, self.xmax, name=name, label=self.title)

def as_axis_spec(axis):
  if isinstance(axis, AxisSpec):
    return axis
  return AxisSpec(*axis)

# Axes shared by the jet-hadron histograms
CENTRALITY_AXIS = AxisSpec(110, -5., 105., 'Centrality')
TRACK_PT_AXIS = AxisSpec(200, -0.5, 199.5, '#it{p}_{T} (GeV/#it{c})')
ETA_AXIS = AxisSpec(100, -1.0, 1.0, '#eta')
PHI_AXIS = AxisSpec(160, -1.0, 7.0, '#varphi')
JET_PT_AXIS = AxisSpec(200, 0., 200., '#it{p}_{T} (GeV/#it{c})')
JET_PT_SUB_AXIS = AxisSpec(280, -80., 200., '#it{p}_{T} (GeV/#it{c})')
DPHI_AXIS = AxisSpec(140, -1.7, 5.3, '#Delta#varphi')
DETA_AXIS = AxisSpec(170, -1.7, 1.7, '#Delta#eta')
DR_AXIS = AxisSpec(110, -1.1, 1.1, '#Delta#it{R}')
DIJET_DPHI_AXIS = AxisSpec(63, 0., 6.3, '#Delta#varphi')
DIJET_DPHI_RAW_AXIS = AxisSpec(126, -6.3, 6.3, '#Delta#varphi')

################################################################
# N-dimensional histogram keeping only filled bins.
# Bins are keyed on the tuple of axis indices (-1 underflow, nbins overflow)
# and hold [sum of weights, sum of squared weights].
class SparseHist(object):

  def __init__(self, *axes, name='', label=''):
    self.axes = tuple(axes)
    self.name = name
    self.label = label
    self.bins = {}

  @property
  def ndim(self):
    return len(self.axes)

  def bin_index(self, values):
    if len(values) != self.ndim:
      raise ValueError('SparseHist {}: expected {} values, got {}'.format(self.name, self.ndim, len(values)))
    return tuple(int(axis.index(v)) for axis, v in zip(self.axes, values))

  def fill(self, *values, weight=1.):
    key = self.bin_index(values)
    sums = self.bins.get(key)
    if sums is None:
      sums = [0., 0.]
      self.bins[key] = sums
    sums[0] += weight
    sums[1] += weight * weight

  def bin_content(self, *values):
    sums = self.bins.get(self.bin_index(values))
    return sums[0] if sums is not None else 0.

  def sum_of_weights(self):
    return sum(sums[0] for sums in self.bins.values())

  def n_filled_bins(self):
    return len(self.bins)

  #---------------------------------------------------------------
  # Dense projection on the axes with the given indices (flow included)
  #---------------------------------------------------------------
  def project(self, *axis_indices):
    h = hist.Hist(*[self.axes[i] for i in axis_indices], storage=hist.storage.Weight())
    view = h.view(flow=True)
    for key, sums in self.bins.items():
      idx = tuple(key[i] + 1 for i in axis_indices)
      view['value'][idx] += sums[0]
      view['variance'][idx] += sums[1]
    return h

################################################################
class HistogramRegistry(MPBase):
  def __init__(self, **kwargs):
    self.configure_from_args(root_file_name='AnalysisResults.root', pickle_file_name='AnalysisResults.pkl')
    super(HistogramRegistry, self).__init__(**kwargs)
    self.histograms = {}
    self.titles = {}
    self.bin_labels = {}

  #---------------------------------------------------------------
  # Register a histogram; registering an existing name keeps the first one
  #---------------------------------------------------------------
  def add(self, name, title, axes):
    if name in self.histograms:
      return self.histograms[name]
    if len(axes) < 1:
      sys.exit('HistogramRegistry::add: histogram {} needs at least one axis'.format(name))
    hist_axes = [as_axis_spec(a).make_axis('x{}'.format(i)) for i, a in enumerate(axes)]
    if len(hist_axes) > MAX_DENSE_DIM:
      h = SparseHist(*hist_axes, name=name, label=title)
    else:
      h = hist.Hist(*hist_axes, storage=hist.storage.Weight(), name=name, label=title)
    self.histograms[name] = h
    self.titles[name] = title
    return h

  def has(self, name):
    return name in self.histograms

  def get(self, name):
    return self.histograms[name]

  def names(self):
    return list(self.histograms.keys())

  #---------------------------------------------------------------
  # Fill one entry; filling an unregistered histogram is a programming error
  #---------------------------------------------------------------
  def fill(self, name, *values, weight=1.0):
    h = self.histograms.get(name)
    if h is None:
      raise KeyError('HistogramRegistry::fill: histogram {} not registered'.format(name))
    h.fill(*values, weight=weight)

  #---------------------------------------------------------------
  # Label bin ibin (1-based, as in ROOT) of the first axis
  #---------------------------------------------------------------
  def set_bin_label(self, name, ibin, label):
    self.bin_labels.setdefault(name, {})[ibin] = label

  #---------------------------------------------------------------
  # Sum of weights in the bin containing the values
  #---------------------------------------------------------------
  def bin_content(self, name, *values):
    h = self.histograms[name]
    if isinstance(h, SparseHist):
      return h.bin_content(*values)
    return h[tuple(hist.loc(v) for v in values)].value

  # Sum of weights, under- and overflow included
  def entries(self, name):
    h = self.histograms[name]
    if isinstance(h, SparseHist):
      return h.sum_of_weights()
    return float(h.sum(flow=True).value)

  #---------------------------------------------------------------
  # Write histograms to output_dir
  #---------------------------------------------------------------
  def write(self, output_dir):
    if not os.path.exists(output_dir):
      os.makedirs(output_dir)

    root_file = os.path.join(output_dir, self.root_file_name)
    sparse = {}
    with uproot.recreate(root_file) as fout:
      for name, h in self.histograms.items():
        if isinstance(h, SparseHist):
          sparse[name] = h
          continue
        fout[name] = h
    pinfo('written {} histograms to {}'.format(len(self.histograms) - len(sparse), root_file))

    pickle_file = os.path.join(output_dir, self.pickle_file_name)
    with open(pickle_file, 'wb') as f:
      pickle.dump({'histograms': sparse, 'titles': self.titles, 'bin_labels': self.bin_labels}, f)
    if sparse:
      pinfo('written {} sparse histograms to {}'.format(len(sparse), pickle_file))
    else:
      pwarning('no sparse histograms registered, {} holds titles and labels only'.format(pickle_file))
