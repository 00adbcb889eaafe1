#!/usr/bin/env python3

"""
  Mixed-event pairing: jets of the current event against the hadrons of
  the events previously cached in the same mixing bin.

  For each new event the pairs are taken from the cache first and only then
  is the event inserted, so an event never sees itself or any later event.
"""

from pyjethadron.mixing.event_binner import UNBINNED
from pyjethadron.mputils import pdebug

################################################################
class MixedPair(object):
  __slots__ = ('event', 'jets', 'cached_event', 'cached_hadrons', 'pool_bin')

  def __init__(self, event, jets, cached_event, cached_hadrons, pool_bin):
    self.event = event
    self.jets = jets
    self.cached_event = cached_event
    self.cached_hadrons = cached_hadrons
    self.pool_bin = pool_bin

  def __iter__(self):
    return iter((self.event, self.jets, self.cached_event, self.cached_hadrons))

################################################################
class PairGenerator(object):

  def __init__(self, binner, cache):
    self.binner = binner
    self.cache = cache
    self.n_unbinned = 0

  #---------------------------------------------------------------
  # Return the MixedPairs of this event (oldest cached event first), then
  # cache the event with its hadrons. Unbinned events are neither paired
  # nor cached.
  #---------------------------------------------------------------
  def process(self, event, jets, hadrons):
    pool_bin = self.binner.get_bin(event)
    if pool_bin == UNBINNED:
      self.n_unbinned += 1
      pdebug('PairGenerator: event {} outside the mixing bins'.format(event), level=2)
      return []

    jets = tuple(jets)
    pairs = [MixedPair(current, jets, cached_event, cached_hadrons, pool_bin)
             for current, cached_event, cached_hadrons in self.cache.pairs_for(event, pool_bin)]
    self.cache.put(pool_bin, event, hadrons)
    return pairs
