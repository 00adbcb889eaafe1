#!/usr/bin/env python3

"""
  Mixing pool binning: (vertex z, multiplicity or centrality) -> bin id.

  Both axes have variable-width edges; an axis bin includes its lower edge
  and excludes its upper edge. The bin id is iz * n_secondary + isecondary.
  Values outside the outermost edges are unbinned and get bin id -1, which
  keeps the event out of the mixing pools.
"""

import bisect

import numpy as np

UNBINNED = -1

################################################################
class EventBinner(object):

  #---------------------------------------------------------------
  # z_edges, secondary_edges: increasing bin edges
  # secondary_value: event -> value of the secondary mixing observable
  # z_value: event -> vertex z (default: event.pos_z)
  #---------------------------------------------------------------
  def __init__(self, z_edges, secondary_edges, secondary_value, z_value=None):
    self.z_edges = self.check_edges(z_edges, 'z_edges')
    self.secondary_edges = self.check_edges(secondary_edges, 'secondary_edges')
    self.secondary_value = secondary_value
    self.z_value = z_value if z_value is not None else (lambda event: event.pos_z)

  @staticmethod
  def check_edges(edges, name):
    edges = [float(e) for e in edges]
    if len(edges) < 2:
      raise ValueError('EventBinner: {} needs at least two edges, got {}'.format(name, edges))
    if np.any(np.diff(edges) <= 0.) or not np.all(np.isfinite(edges)):
      raise ValueError('EventBinner: {} must be finite and strictly increasing, got {}'.format(name, edges))
    return edges

  def n_z_bins(self):
    return len(self.z_edges) - 1

  def n_secondary_bins(self):
    return len(self.secondary_edges) - 1

  def n_bins(self):
    return self.n_z_bins() * self.n_secondary_bins()

  #---------------------------------------------------------------
  # Index of the axis bin containing value, or -1
  #---------------------------------------------------------------
  @staticmethod
  def axis_bin(edges, value):
    if not (edges[0] <= value < edges[-1]):
      return UNBINNED
    return bisect.bisect_right(edges, value) - 1

  def bin_of(self, z, secondary):
    iz = self.axis_bin(self.z_edges, z)
    isec = self.axis_bin(self.secondary_edges, secondary)
    if iz == UNBINNED or isec == UNBINNED:
      return UNBINNED
    return iz * self.n_secondary_bins() + isec

  def get_bin(self, event):
    return self.bin_of(self.z_value(event), self.secondary_value(event))
