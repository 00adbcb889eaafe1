from pyjethadron.mixing import EventBinner, MixingCache, PairGenerator

from conftest import make_collision, make_jet, make_track

def make_generator(number_events_mixed=3):
  binner = EventBinner([-10., 0., 10.], [0., 50., 100.], lambda collision: collision.multiplicity())
  return PairGenerator(binner, MixingCache(number_events_mixed))

def test_first_event_has_no_pairs():
  generator = make_generator()
  assert generator.process(make_collision(), [make_jet(40.)], [make_track()]) == []
  assert len(generator.cache) == 1

def test_pairs_in_insertion_order_after_eviction():
  generator = make_generator(3)
  events = [make_collision(ev_id=i, pos_z=-5., mult=10) for i in range(1, 6)]
  hadrons = {}
  for event in events[:4]:
    hadrons[event.ev_id] = [make_track(pt=float(event.ev_id))]
    generator.process(event, [], hadrons[event.ev_id])

  jets = [make_jet(40.)]
  pairs = generator.process(events[4], jets, [make_track()])
  assert [p.cached_event for p in pairs] == events[1:4]
  for pair in pairs:
    assert pair.event is events[4]
    assert list(pair.jets) == jets
    assert list(pair.cached_hadrons) == hadrons[pair.cached_event.ev_id]
    assert pair.pool_bin == 0
  assert [e for e, _ in generator.cache.entries(0)] == events[2:5]

def test_pair_unpacking():
  generator = make_generator()
  first = make_collision(ev_id=1)
  second = make_collision(ev_id=2)
  generator.process(first, [], [make_track()])
  (pair,) = generator.process(second, [make_jet(30.)], [])
  event, jets, cached_event, cached_hadrons = pair
  assert event is second
  assert cached_event is first
  assert len(jets) == 1
  assert len(cached_hadrons) == 1

def test_events_only_mix_within_their_bin():
  generator = make_generator()
  generator.process(make_collision(ev_id=1, pos_z=-5., mult=10), [], [])
  assert generator.process(make_collision(ev_id=2, pos_z=5., mult=10), [], []) == []
  assert generator.process(make_collision(ev_id=3, pos_z=-5., mult=60), [], []) == []
  assert len(generator.process(make_collision(ev_id=4, pos_z=-5., mult=20), [], [])) == 1

def test_unbinned_events_are_skipped():
  generator = make_generator()
  assert generator.process(make_collision(pos_z=12.), [], []) == []
  assert generator.process(make_collision(mult=500), [], []) == []
  assert generator.n_unbinned == 2
  assert len(generator.cache) == 0
