#!/usr/bin/env python3

"""
  Per-bin FIFO buffers of previously seen events for event mixing.

  Each mixing bin keeps at most number_events_mixed (event, hadrons)
  entries; inserting into a full buffer evicts the oldest entry. Buffers are
  created on the first insertion into a bin and live as long as the cache.
  Memory is therefore bounded by n_bins * number_events_mixed events.
"""

import collections

################################################################
class MixingCache(object):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, number_events_mixed):
    if int(number_events_mixed) != number_events_mixed or number_events_mixed < 1:
      raise ValueError('MixingCache: number_events_mixed must be an integer >= 1, got {}'.format(number_events_mixed))
    self.number_events_mixed = int(number_events_mixed)
    self.buffers = {}

  #---------------------------------------------------------------
  # Append (event, hadrons) to the buffer of pool_bin
  #---------------------------------------------------------------
  def put(self, pool_bin, event, hadrons):
    buffer = self.buffers.get(pool_bin)
    if buffer is None:
      buffer = collections.deque(maxlen=self.number_events_mixed)
      self.buffers[pool_bin] = buffer
    buffer.append((event, tuple(hadrons)))

  #---------------------------------------------------------------
  # Yield (event, cached_event, cached_hadrons) for every entry in pool_bin,
  # oldest first. An entry holding event itself is skipped.
  #---------------------------------------------------------------
  def pairs_for(self, event, pool_bin):
    buffer = self.buffers.get(pool_bin)
    if not buffer:
      return
    for cached_event, cached_hadrons in tuple(buffer):
      if cached_event is event:
        continue
      yield event, cached_event, cached_hadrons

  def entries(self, pool_bin):
    return list(self.buffers.get(pool_bin, ()))

  def size(self, pool_bin):
    buffer = self.buffers.get(pool_bin)
    return len(buffer) if buffer is not None else 0

  def n_active_bins(self):
    return len(self.buffers)

  def __len__(self):
    return sum(len(b) for b in self.buffers.values())

  def clear(self):
    self.buffers.clear()
