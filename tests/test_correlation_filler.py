import math

import pytest

from pyjethadron.correlation import LeadingJetHadronFiller, JetHadronFiller, D0JetFiller
from pyjethadron.process.base.event_info import D0Candidate

from conftest import make_jet, make_track, make_particle

DIJET = [make_jet(50., eta=0., phi=0.), make_jet(30., eta=-0.3, phi=math.pi)]

@pytest.fixture
def filler(registry, utils):
  return LeadingJetHadronFiller(registry, utils)

@pytest.fixture
def mixed_filler(registry, utils):
  return LeadingJetHadronFiller(registry, utils, mixed=True, n_pool_bins=12)

def test_leading_jet_hadron_correlation(filler, registry):
  hadron = make_track(pt=5., eta=0.1, phi=0.2)
  assert filler.fill_correlations(0., DIJET, [hadron], centrality=30.) == 1

  assert registry.entries('h_centrality') == 1.
  assert registry.entries('h_inclusivejet_corrpt') == 2.
  assert registry.entries('h_dijet_pair_counts') == 1.
  assert registry.entries('h_dijet_pair_counts_cut') == 1.
  assert registry.bin_content('h_leadjet_pt', 50.) == 1.
  assert registry.bin_content('h_subleadjet_pt', 30.) == 1.
  assert registry.bin_content('h_dijet_dphi', 0. - math.pi) == 1.
  assert registry.bin_content('h2_dijet_deta_dphi', 0.3, math.pi) == 1.
  assert registry.bin_content('h2_dijet_Asymmetry', 30., 0.6) == 1.
  assert registry.bin_content('h_jeth_deta', 0.1) == 1.
  assert registry.bin_content('h_jeth_dphi', 0.2) == 1.
  assert registry.bin_content('thn_jethadron_correlations', 50., 30., 5., 0.1, 0.3, 0.1, 0.2) == 1.
  assert registry.get('thn_jethadron_correlations').n_filled_bins() == 1

def test_eta_flip_applies_to_hadron(filler, registry):
  jets = [make_jet(50., eta=0., phi=0.), make_jet(30., eta=0.3, phi=math.pi)]
  filler.fill_correlations(0., jets, [make_track(pt=5., eta=0.1, phi=0.2)])
  assert registry.bin_content('h_jeth_detatot', 0.1) == 1.
  assert registry.bin_content('h_jeth_deta', -0.1) == 1.
  assert registry.bin_content('h2_dijet_detanoflip_dphi', 0. - 0.3, math.pi) == 1.
  assert registry.bin_content('h2_dijet_deta_dphi', -0. + 0.3, math.pi) == 1.

def test_rho_subtraction(filler, registry):
  filler.fill_correlations(10., DIJET, [make_track()])
  assert registry.bin_content('h_leadjet_corrpt', 46.) == 1.
  assert registry.bin_content('h_subleadjet_corrpt', 26.) == 1.
  assert registry.get('thn_jethadron_correlations').bin_content(46., 26., 5., 0., 0.3, 0., 0.) == 1.

def test_single_jet_emits_nothing(filler, registry):
  hadrons = [make_track(pt=float(i)) for i in range(1, 10)]
  assert filler.fill_correlations(0., [make_jet(50.)], hadrons) == 0
  assert registry.entries('h_dijet_pair_counts') == 0.
  assert registry.get('thn_jethadron_correlations').n_filled_bins() == 0

def test_jets_outside_acceptance_are_ignored(filler, registry):
  jets = [make_jet(50., eta=0.), make_jet(30., eta=0.8, phi=math.pi)]
  assert filler.fill_correlations(0., jets, [make_track()]) == 0
  assert registry.entries('h_inclusivejet_corrpt') == 1.

def test_near_side_dijet_rejected(filler, registry):
  jets = [make_jet(50., phi=0.3), make_jet(30., phi=0.)]
  assert filler.fill_correlations(0., jets, [make_track()]) == 0
  assert registry.entries('h_inclusivejet_corrpt') == 2.
  assert registry.entries('h_dijet_dphi') == 0.
  assert registry.entries('h_dijet_pair_counts') == 0.
  assert registry.get('thn_jethadron_correlations').n_filled_bins() == 0

def test_dijet_rejected_after_wrapping(filler, registry):
  # raw dphi 5.9 passes, wrapped dphi 5.9 - 2pi does not
  jets = [make_jet(50., phi=6.0), make_jet(30., phi=0.1)]
  assert filler.fill_correlations(0., jets, [make_track()]) == 0
  assert registry.entries('h_dijet_dphi') == 1.
  assert registry.entries('h_dijet_pair_counts') == 0.

def test_subleading_threshold(filler, registry):
  jets = [make_jet(50., phi=0.), make_jet(8., phi=math.pi)]
  assert filler.fill_correlations(0., jets, [make_track()]) == 0
  assert registry.entries('h_dijet_pair_counts') == 1.
  assert registry.entries('h_dijet_pair_counts_cut') == 0.

def test_leading_threshold(filler, registry):
  jets = [make_jet(18., phi=0.), make_jet(15., phi=math.pi)]
  assert filler.fill_correlations(0., jets, [make_track()]) == 0
  assert registry.entries('h_dijet_pair_counts_cut') == 0.

def test_unselected_tracks_skipped(filler, registry):
  hadrons = [make_track(track_sel=0), make_track(pt=3.)]
  assert filler.fill_correlations(0., DIJET, hadrons) == 1
  assert registry.entries('h_jeth_deta') == 1.

@pytest.mark.parametrize('eta1, eta2, buckets', [
  (0.5, -0.6, ['up']),
  (0.65, 0.0, ['md', 'Hup']),
  (0.6, 0.2, ['dw', 'Hdw']),
  (-0.2, 0.1, ['dw']),
])
def test_eta_gap_buckets(filler, registry, eta1, eta2, buckets):
  jets = [make_jet(50., eta=eta1, phi=0.), make_jet(30., eta=eta2, phi=math.pi)]
  filler.fill_correlations(0., jets, [make_track(pt=1.), make_track(pt=2.5)])
  for bucket in ['up', 'md', 'dw', 'Hup', 'Hdw']:
    expected = 1. if bucket in buckets else 0.
    assert registry.entries('h2_jeth_physicalcuts{}_deta_dphi'.format(bucket)) == expected
  assert registry.entries('h2_jeth_deta_dphi') == 2.

def test_weight(filler, registry):
  filler.fill_correlations(0., DIJET, [make_track()], weight=0.25)
  assert registry.entries('h_leadjet_pt') == 0.25
  assert registry.entries('h_dijet_pair_counts') == 1.

def test_mixed_event_statistics(mixed_filler, registry):
  hadrons = [make_track(track_sel=0), make_track(pt=3.), make_track(pt=4.)]
  assert mixed_filler.fill_correlations(0., DIJET, hadrons, pool_bin=5) == 2
  assert mixed_filler.fill_correlations(0., [make_jet(50.)], hadrons, pool_bin=5) == 0
  mixed_filler.finalize()

  name = 'h_event_stats_mix'
  expected = {1: 2., 2: 1., 3: 1., 4: 3., 5: 2., 6: 2., 7: 1., 8: 1., 9: 3., 10: 2.}
  for ibin, value in expected.items():
    assert registry.bin_content(name, ibin) == value
  assert registry.bin_labels[name][1] == 'Total mixed events'
  assert registry.bin_labels[name][6] == 'Total mixed events (run total)'

  thn = registry.get('thn_jethadron_correlations_mix')
  assert thn.ndim == 8
  assert thn.bin_content(50., 30., 3., 0., 0.3, 0., 0., 5) == 1.
  assert not registry.has('h_centrality_mix')
  assert not registry.has('h_inclusivejet_corrpt_mix')

def test_mixed_and_same_event_histograms_are_separate(filler, mixed_filler, registry):
  filler.fill_correlations(0., DIJET, [make_track()])
  assert registry.entries('h_dijet_pair_counts') == 1.
  assert registry.entries('h_dijet_pair_counts_mix') == 0.
  assert registry.titles['h_leadjet_pt_mix'].startswith('mixed event: ')

def test_particle_level(registry, utils):
  filler = LeadingJetHadronFiller(registry, utils, particle_level=True)
  assert filler.fill_correlations(0., DIJET, [make_particle(pt=2.5, eta=0.1, phi=0.2)], centrality=12.) == 1
  assert registry.entries('h_centrality_part') == 1.
  assert registry.get('thn_jethadron_correlations_part').bin_content(50., 30., 2.5, 0.1, 0.3, 0.1, 0.2) == 1.
  assert registry.titles['h_leadjet_pt_part'].startswith('MCP ')

def test_mixed_particle_level_names(registry, utils):
  filler = LeadingJetHadronFiller(registry, utils, mixed=True, particle_level=True, n_pool_bins=4)
  filler.fill_correlations(0., DIJET, [make_particle()], pool_bin=3)
  assert registry.entries('h_dijet_pair_counts_mixpart') == 1.
  assert registry.get('thn_jethadron_correlations_mixpart').n_filled_bins() == 1

def test_jet_hadron(registry, utils):
  filler = JetHadronFiller(registry, utils)
  jets = [make_jet(50., eta=0., phi=0.), make_jet(5., eta=0.1, phi=2.), make_jet(40., eta=0.9)]
  hadrons = [make_track(pt=3., eta=0.2, phi=0.5), make_track(track_sel=0)]
  assert filler.fill_correlations(0., jets, hadrons) == 1

  expected = {1: 1., 2: 2., 3: 1., 4: 2., 5: 1.}
  for ibin, value in expected.items():
    assert registry.bin_content('h_jeth_event_stats', ibin) == value
  deta = 0.2 - 0.
  dphi = 0.5 - 0.
  dr = math.sqrt(deta * deta + dphi * dphi)
  assert registry.get('thn_jeth_correlations').bin_content(50., 3., deta, dphi, dr) == 1.

def test_jet_hadron_near_side(registry, utils):
  # a single jet is enough, no dijet topology
  filler = JetHadronFiller(registry, utils, mixed=True)
  assert filler.fill_correlations(2., [make_jet(30., phi=1.)], [make_track(phi=1.2), make_track(phi=4.)]) == 2
  assert registry.get('thn_jeth_correlations_mix').sum_of_weights() == 2.

def test_d0_jet(registry, utils):
  filler = D0JetFiller(registry, utils)
  jets = [make_jet(20., eta=0.1, phi=1.0), make_jet(25., eta=0.9, phi=1.0)]
  candidates = [D0Candidate(3., 0.3, 1.5, 1.86)]
  # only the jet spectra use the eta acceptance, the map pairs with every jet
  assert filler.fill_correlations(5., jets, candidates) == 2
  assert registry.entries('h_d0jet_pt') == 1.
  assert registry.bin_content('h_d0jet_corrpt', 20. - 5. * 0.4) == 1.
  assert registry.entries('h_d0_mass') == 1.
  assert registry.entries('h2_d0jet_detadphi') == 2.
  assert registry.bin_content('h2_d0jet_detadphi', 0.3 - 0.1, 1.5 - 1.0) == 1.
  assert registry.bin_content('h2_d0jet_detadphi', 0.3 - 0.9, 1.5 - 1.0) == 1.
