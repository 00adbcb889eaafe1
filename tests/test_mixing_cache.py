import pytest

from pyjethadron.mixing import MixingCache

from conftest import make_collision, make_track

def test_bad_size():
  with pytest.raises(ValueError):
    MixingCache(0)
  with pytest.raises(ValueError):
    MixingCache(2.5)

def test_buffer_bound():
  cache = MixingCache(3)
  events = [make_collision(ev_id=i) for i in range(7)]
  for event in events:
    cache.put(4, event, [make_track()])
  assert cache.size(4) == 3
  assert [e for e, _ in cache.entries(4)] == events[-3:]

def test_bins_are_independent():
  cache = MixingCache(2)
  cache.put(0, make_collision(ev_id=1), [])
  cache.put(1, make_collision(ev_id=2), [])
  cache.put(1, make_collision(ev_id=3), [])
  assert cache.size(0) == 1
  assert cache.size(1) == 2
  assert cache.size(7) == 0
  assert cache.n_active_bins() == 2
  assert len(cache) == 3
  cache.clear()
  assert len(cache) == 0

def test_hadrons_are_stored_with_event():
  cache = MixingCache(2)
  event = make_collision(ev_id=1)
  hadrons = [make_track(pt=1.), make_track(pt=2.)]
  cache.put(0, event, hadrons)
  cached_event, cached_hadrons = cache.entries(0)[0]
  assert cached_event is event
  assert list(cached_hadrons) == hadrons

def test_no_self_pairing():
  cache = MixingCache(5)
  events = [make_collision(ev_id=i) for i in range(4)]
  for event in events:
    assert all(cached is not event for _, cached, _ in cache.pairs_for(event, 0))
    cache.put(0, event, [])
  # an event already in the cache is never paired with itself
  assert [cached for _, cached, _ in cache.pairs_for(events[2], 0)] == [events[0], events[1], events[3]]

def test_empty_bin_has_no_pairs():
  cache = MixingCache(3)
  assert list(cache.pairs_for(make_collision(), 2)) == []

def test_pairs_after_eviction():
  cache = MixingCache(3)
  events = [make_collision(ev_id=i) for i in range(1, 6)]
  for event in events[:4]:
    cache.put(0, event, [])
  pairs = list(cache.pairs_for(events[4], 0))
  assert [cached for _, cached, _ in pairs] == events[1:4]
  assert all(current is events[4] for current, _, _ in pairs)
