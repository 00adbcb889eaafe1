#!/usr/bin/env python3

"""
  Jet-hadron correlation fillers.

  LeadingJetHadronFiller correlates hadrons with the leading jet of a
  back-to-back dijet, JetHadronFiller with every jet above the subleading
  jet threshold, and D0JetFiller correlates D0 candidates with jets.

  Every filler registers its histograms in a HistogramRegistry at
  construction and then only fills it. The same filler class serves the
  same-event and the mixed-event correlation, at detector and at particle
  level; the variant only changes the histogram name suffix, the source of
  the hadrons and (for mixed events) the additional pool bin axis.
"""

import math

from pyjethadron.correlation.angles import wrap_delta_phi, sign_flip, is_back_to_back
from pyjethadron.correlation.leading_jet import find_leading_pair
from pyjethadron.process.base.histogram_registry import AxisSpec, TRACK_PT_AXIS, ETA_AXIS, PHI_AXIS, \
  JET_PT_AXIS, JET_PT_SUB_AXIS, DPHI_AXIS, DETA_AXIS, DR_AXIS, DIJET_DPHI_AXIS, DIJET_DPHI_RAW_AXIS, \
  CENTRALITY_AXIS
from pyjethadron.mputils import pdebug

# Hadrons below this pT also enter the dijet eta-gap histograms
HADRON_PT_MAX_ETA_GAP = 2.001
ETA_GAP_LOW = 0.5
ETA_GAP_HIGH = 1.0

# Histogram name suffix per variant
SUFFIX_SAME = ''
SUFFIX_MIXED = '_mix'
SUFFIX_PART = '_part'
SUFFIX_MIXED_PART = '_mixpart'

# Bins of the mixed-event statistics histograms
STATS_LABELS_DIJET = ['Total mixed events', 'Total dijets', 'Total dijets with cuts',
                      'Total Lj-h pairs', 'Total Lj-h pairs with cut']
STATS_LABELS_JET = ['Total events', 'Total jets', 'Total jets with cuts',
                    'Total j-h pairs', 'Total j-h pairs accepted']

def variant_suffix(mixed, particle_level):
  if mixed:
    return SUFFIX_MIXED_PART if particle_level else SUFFIX_MIXED
  return SUFFIX_PART if particle_level else SUFFIX_SAME

################################################################
# Shared setup: registry, selections, settings and variant
class FillerBase(object):

  def __init__(self, registry, utils, mixed=False, particle_level=False, n_pool_bins=10):
    self.registry = registry
    self.utils = utils
    self.settings = utils.settings
    self.mixed = mixed
    self.particle_level = particle_level
    self.n_pool_bins = max(int(n_pool_bins), 1)
    self.suffix = variant_suffix(mixed, particle_level)

  def hname(self, base):
    return base + self.suffix

  def add(self, base, title, axes):
    label = 'mixed event: ' + title if self.mixed else title
    if self.particle_level:
      label = 'MCP ' + label
    self.registry.add(self.hname(base), label, axes)

  def fill(self, base, *values, weight=1.):
    self.registry.fill(self.hname(base), *values, weight=weight)

  def pool_bin_axis(self):
    return AxisSpec(self.n_pool_bins, 0, self.n_pool_bins, 'poolBin')

  #---------------------------------------------------------------
  # Jets entering any correlation: eta acceptance and jet acceptance
  #---------------------------------------------------------------
  def accept_jet(self, jet):
    return self.utils.is_in_eta_acceptance(jet) and self.utils.is_accepted_jet(jet, self.particle_level)

  #---------------------------------------------------------------
  # Particles carry no selection bits
  #---------------------------------------------------------------
  def accept_hadron(self, hadron):
    if self.particle_level:
      return True
    return self.utils.select_track(hadron)

################################################################
class LeadingJetHadronFiller(FillerBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, registry, utils, mixed=False, particle_level=False, n_pool_bins=10):
    super(LeadingJetHadronFiller, self).__init__(registry, utils, mixed, particle_level, n_pool_bins)
    self.totals = {'mixed_events': 0, 'dijets': 0, 'dijets_cut': 0, 'pairs': 0, 'pairs_accepted': 0}
    self.initialize_histograms()

  #---------------------------------------------------------------
  # Register histograms
  #---------------------------------------------------------------
  def initialize_histograms(self):

    if not self.mixed:
      self.add('h_centrality', 'centrality distributions; centrality; counts', [CENTRALITY_AXIS])
      self.add('h_inclusivejet_corrpt', 'inclusive jet pT;#it{p}_{T,jet} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])

    self.add('h_dijet_pair_counts', 'number of pairs with good leading-subleading jets; jet pairs; counts', [(10, 0, 10)])
    self.add('h_dijet_pair_counts_cut', 'number of pairs with leadingjet & subleadingjet cut pair; jet pairs; counts', [(10, 0, 10)])
    self.add('h_dijet_dphi', 'dijet #Delta#varphi before wrapping; #Delta#varphi; counts', [DIJET_DPHI_RAW_AXIS])
    self.add('h_leadjet_pt', 'leading jet pT;#it{p}_{T,leadingjet} (GeV/#it{c}); counts', [JET_PT_AXIS])
    self.add('h_subleadjet_pt', 'subleading jet pT;#it{p}_{T,subleadingjet} (GeV/#it{c}); counts', [JET_PT_AXIS])
    self.add('h_leadjet_corrpt', 'leading jet corrpT;#it{p}_{T,leadingjet} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])
    self.add('h_subleadjet_corrpt', 'subleading jet corrpT;#it{p}_{T,subleadingjet} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])
    self.add('h_leadjet_eta', 'leading jet eta;#eta; counts', [ETA_AXIS])
    self.add('h_subleadjet_eta', 'subleading jet eta;#eta; counts', [ETA_AXIS])
    self.add('h_leadjet_phi', 'leading jet phi;#phi; counts', [PHI_AXIS])
    self.add('h_subleadjet_phi', 'subleading jet phi;#phi; counts', [PHI_AXIS])
    self.add('h2_dijet_detanoflip_dphi', 'dijet #Delta#eta no flip vs #Delta#varphi; #Delta#eta_{noflip}; #Delta#varphi; counts',
             [DETA_AXIS, DIJET_DPHI_AXIS])
    self.add('h2_dijet_deta_dphi', 'dijet #Delta#eta flip vs #Delta#varphi; #Delta#eta_{flip}; #Delta#varphi; counts',
             [DETA_AXIS, DIJET_DPHI_AXIS])
    self.add('h2_dijet_Asymmetry', 'dijet Asymmetry; #it{p}_{T,subleadingjet} (GeV/#it{c}); #it{X}_{J}; counts',
             [JET_PT_SUB_AXIS, (40, 0, 1.0)])

    self.add('h_jeth_detatot', 'jet-hadron no flip #Delta#eta;#Delta#eta; counts', [DETA_AXIS])
    self.add('h_jeth_deta', 'jet-hadron #Delta#eta;#Delta#eta; counts', [DETA_AXIS])
    self.add('h_jeth_dphi', 'jet-hadron #Delta#varphi;#Delta#varphi; counts', [DPHI_AXIS])
    self.add('h2_jeth_detatot_dphi', 'jeth no flip deta vs dphi; #Delta#eta; #Delta#phi', [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_deta_dphi', 'jeth deta vs dphi; #Delta#eta; #Delta#phi', [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_physicalcutsup_deta_dphi', 'jeth deta vs dphi |#Delta#eta_{jet1,2}| >= 1.0; #Delta#eta; #Delta#phi',
             [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_physicalcutsmd_deta_dphi', 'jeth deta vs dphi |#Delta#eta_{jet1,2}| #in [0.5, 1.0); #Delta#eta; #Delta#phi',
             [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_physicalcutsdw_deta_dphi', 'jeth deta vs dphi |#Delta#eta_{jet1,2}| < 0.5; #Delta#eta; #Delta#phi',
             [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_physicalcutsHup_deta_dphi', 'jeth deta vs dphi |#Delta#eta_{jet1,2}| >= 0.5, #eta_{jet2} >= 0; #Delta#eta; #Delta#phi',
             [DETA_AXIS, DPHI_AXIS])
    self.add('h2_jeth_physicalcutsHdw_deta_dphi', 'jeth deta vs dphi |#Delta#eta_{jet1,2}| < 0.5, #eta_{jet2} >= 0; #Delta#eta; #Delta#phi',
             [DETA_AXIS, DPHI_AXIS])

    axes = [JET_PT_SUB_AXIS, JET_PT_SUB_AXIS, TRACK_PT_AXIS, DETA_AXIS, DETA_AXIS, DETA_AXIS, DPHI_AXIS]
    title = 'jet-h correlations; leadingjetpT; subleadingjetpT; trackpT; no flip jeth#Delta#eta; #Delta#eta_{jet1,2}; jeth#Delta#eta; jeth#Delta#varphi'
    if self.mixed:
      axes.append(self.pool_bin_axis())
      title += '; poolBin'
      self.add('h_event_stats', 'event statistics; Event pair type; counts', [(10, 0.5, 10.5)])
      for i, label in enumerate(STATS_LABELS_DIJET):
        self.registry.set_bin_label(self.hname('h_event_stats'), i+1, label)
        self.registry.set_bin_label(self.hname('h_event_stats'), i+6, label + ' (run total)')
    self.add('thn_jethadron_correlations', title, axes)

  #---------------------------------------------------------------
  # Correlate hadrons with the leading jet of the jets' dijet.
  #   rho:      background density of the event the jets belong to
  #   hadrons:  same-event hadrons, or hadrons of a cached event
  #   pool_bin: mixing bin of the pairing (mixed events only)
  # Return the number of correlation entries filled.
  #---------------------------------------------------------------
  def fill_correlations(self, rho, jets, hadrons, weight=1., pool_bin=None, centrality=None):

    if self.mixed:
      self.totals['mixed_events'] += 1
      self.fill('h_event_stats', 1)
    elif centrality is not None:
      self.fill('h_centrality', centrality)

    on_accepted = None
    if not self.mixed:
      on_accepted = lambda jet, pt_corr: self.fill('h_inclusivejet_corrpt', pt_corr, weight=weight)
    pair = find_leading_pair(jets, rho, is_accepted=self.accept_jet, on_accepted=on_accepted)
    if pair is None:
      return 0
    leading = pair.leading
    subleading = pair.subleading

    # Back-to-back requirement on the raw and on the wrapped dijet dphi
    dphi_jets = leading.phi() - subleading.phi()
    if not is_back_to_back(dphi_jets):
      return 0
    self.fill('h_dijet_dphi', dphi_jets, weight=weight)
    dphi_jets = wrap_delta_phi(dphi_jets)
    if not is_back_to_back(dphi_jets):
      pdebug('dijet rejected after wrapping: dphi = {:.3f}'.format(dphi_jets), level=2)
      return 0

    eta_jet1 = leading.eta()
    eta_jet2 = subleading.eta()
    flip = sign_flip(eta_jet1, eta_jet2)
    deta_jets_noflip = eta_jet1 - eta_jet2
    deta_jets = flip * eta_jet1 - flip * eta_jet2

    if self.mixed:
      self.totals['dijets'] += 1
      self.fill('h_event_stats', 2)
    self.fill('h_dijet_pair_counts', 1)
    self.fill('h_leadjet_pt', leading.pt(), weight=weight)
    self.fill('h_subleadjet_pt', subleading.pt(), weight=weight)
    self.fill('h_leadjet_corrpt', pair.pt_leading_corr, weight=weight)
    self.fill('h_subleadjet_corrpt', pair.pt_subleading_corr, weight=weight)

    if not (pair.pt_leading_corr > self.settings.leadingjetptMin and pair.pt_subleading_corr > self.settings.subleadingjetptMin):
      return 0

    if self.mixed:
      self.totals['dijets_cut'] += 1
      self.fill('h_event_stats', 3)
    self.fill('h_dijet_pair_counts_cut', 2)
    self.fill('h_leadjet_eta', eta_jet1, weight=weight)
    self.fill('h_subleadjet_eta', eta_jet2, weight=weight)
    self.fill('h_leadjet_phi', leading.phi(), weight=weight)
    self.fill('h_subleadjet_phi', subleading.phi(), weight=weight)
    self.fill('h2_dijet_detanoflip_dphi', deta_jets_noflip, dphi_jets, weight=weight)
    self.fill('h2_dijet_deta_dphi', deta_jets, dphi_jets, weight=weight)
    self.fill('h2_dijet_Asymmetry', pair.pt_subleading_corr, pair.asymmetry(), weight=weight)

    eta_gap = abs(deta_jets)
    same_hemisphere = eta_jet1 > eta_jet2 and eta_jet2 >= 0.
    n_filled = 0
    for hadron in hadrons:
      if self.mixed:
        self.totals['pairs'] += 1
        self.fill('h_event_stats', 4)
      if not self.accept_hadron(hadron):
        continue
      if self.mixed:
        self.totals['pairs_accepted'] += 1
        self.fill('h_event_stats', 5)

      # all eta differences are relative to the unflipped leading jet eta
      deta_tot = hadron.eta() - eta_jet1
      deta = flip * deta_tot
      dphi = wrap_delta_phi(hadron.phi() - leading.phi())

      self.fill('h_jeth_detatot', deta_tot, weight=weight)
      self.fill('h_jeth_deta', deta, weight=weight)
      self.fill('h_jeth_dphi', dphi, weight=weight)
      self.fill('h2_jeth_detatot_dphi', deta_tot, dphi, weight=weight)
      self.fill('h2_jeth_deta_dphi', deta, dphi, weight=weight)
      values = [pair.pt_leading_corr, pair.pt_subleading_corr, hadron.pt(), deta_tot, deta_jets, deta, dphi]
      if self.mixed:
        values.append(pool_bin)
      self.fill('thn_jethadron_correlations', *values, weight=weight)
      n_filled += 1

      if hadron.pt() < HADRON_PT_MAX_ETA_GAP:
        if eta_gap >= ETA_GAP_HIGH:
          self.fill('h2_jeth_physicalcutsup_deta_dphi', deta, dphi, weight=weight)
        elif eta_gap >= ETA_GAP_LOW:
          self.fill('h2_jeth_physicalcutsmd_deta_dphi', deta, dphi, weight=weight)
        else:
          self.fill('h2_jeth_physicalcutsdw_deta_dphi', deta, dphi, weight=weight)
        if same_hemisphere:
          if eta_gap >= ETA_GAP_LOW:
            self.fill('h2_jeth_physicalcutsHup_deta_dphi', deta, dphi, weight=weight)
          else:
            self.fill('h2_jeth_physicalcutsHdw_deta_dphi', deta, dphi, weight=weight)

    return n_filled

  #---------------------------------------------------------------
  # Write the run totals into bins 6-10 of the statistics histogram
  #---------------------------------------------------------------
  def finalize(self):
    if not self.mixed:
      return
    keys = ['mixed_events', 'dijets', 'dijets_cut', 'pairs', 'pairs_accepted']
    for i, key in enumerate(keys):
      self.fill('h_event_stats', i+6, weight=self.totals[key])

################################################################
class JetHadronFiller(FillerBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, registry, utils, mixed=False, particle_level=False, n_pool_bins=10):
    super(JetHadronFiller, self).__init__(registry, utils, mixed, particle_level, n_pool_bins)
    self.initialize_histograms()

  def initialize_histograms(self):
    self.add('thn_jeth_correlations', 'jet-h correlations; jetpT; trackpT; jeth#Delta#eta; jeth#Delta#varphi; jeth#Delta#it{R}',
             [JET_PT_SUB_AXIS, TRACK_PT_AXIS, DETA_AXIS, DPHI_AXIS, DR_AXIS])
    self.add('h_jeth_event_stats', 'event statistics; Event pair type; counts', [(10, 0.5, 10.5)])
    for i, label in enumerate(STATS_LABELS_JET):
      self.registry.set_bin_label(self.hname('h_jeth_event_stats'), i+1, label)

  #---------------------------------------------------------------
  # Correlate hadrons with every accepted jet with ptCorr >= subleadingjetptMin.
  # No dijet topology is required.
  #---------------------------------------------------------------
  def fill_correlations(self, rho, jets, hadrons, weight=1.):

    self.fill('h_jeth_event_stats', 1)
    hadrons = tuple(hadrons)
    n_filled = 0
    for jet in jets:
      if not self.accept_jet(jet):
        continue
      self.fill('h_jeth_event_stats', 2)
      pt_corr = jet.pt_corr(rho)
      if pt_corr < self.settings.subleadingjetptMin:
        continue
      self.fill('h_jeth_event_stats', 3)

      for hadron in hadrons:
        self.fill('h_jeth_event_stats', 4)
        if not self.accept_hadron(hadron):
          continue
        self.fill('h_jeth_event_stats', 5)
        deta = hadron.eta() - jet.eta()
        dphi = wrap_delta_phi(hadron.phi() - jet.phi())
        dr = math.sqrt(deta * deta + dphi * dphi)
        self.fill('thn_jeth_correlations', pt_corr, hadron.pt(), deta, dphi, dr, weight=weight)
        n_filled += 1

    return n_filled

################################################################
class D0JetFiller(FillerBase):

  def __init__(self, registry, utils):
    super(D0JetFiller, self).__init__(registry, utils)
    self.add('h_d0jet_pt', 'D0 jet pT;#it{p}_{T,jet} (GeV/#it{c}); counts', [JET_PT_AXIS])
    self.add('h_d0jet_corrpt', 'D0 jet corrpT;#it{p}_{T,jet} (GeV/#it{c}); counts', [JET_PT_SUB_AXIS])
    self.add('h_d0jet_eta', 'D0 jet eta;#eta; counts', [ETA_AXIS])
    self.add('h_d0jet_phi', 'D0 jet phi;#phi; counts', [PHI_AXIS])
    self.add('h_d0_pt', ';p_{T,D^{0}};dN/dp_{T,D^{0}}', [(200, 0., 10.)])
    self.add('h_d0_mass', ';m_{D^{0}} (GeV/c^{2});dN/dm_{D^{0}}', [(1000, 0., 10.)])
    self.add('h_d0_eta', ';#eta_{D^{0}};dN/d#eta_{D^{0}}', [(200, -5., 5.)])
    self.add('h_d0_phi', ';#varphi_{D^{0}};dN/d#varphi_{D^{0}}', [(200, -10., 10.)])
    self.add('h2_d0jet_detadphi', 'D^{0}-jets deta vs dphi; #Delta#eta; #Delta#phi', [DETA_AXIS, DPHI_AXIS])

  #---------------------------------------------------------------
  # Spectra of jets in the eta acceptance, D0 spectra, and the D0-jet
  # (deta, dphi) map against every jet of the event
  #---------------------------------------------------------------
  def fill_correlations(self, rho, jets, candidates):

    for jet in jets:
      if not self.utils.is_in_eta_acceptance(jet):
        continue
      self.fill('h_d0jet_pt', jet.pt())
      self.fill('h_d0jet_corrpt', jet.pt_corr(rho))
      self.fill('h_d0jet_eta', jet.eta())
      self.fill('h_d0jet_phi', jet.phi())

    n_filled = 0
    for candidate in candidates:
      self.fill('h_d0_mass', candidate.m())
      self.fill('h_d0_pt', candidate.pt())
      self.fill('h_d0_eta', candidate.eta())
      self.fill('h_d0_phi', candidate.phi())
      for jet in jets:
        deta = candidate.eta() - jet.eta()
        dphi = wrap_delta_phi(candidate.phi() - jet.phi())
        self.fill('h2_d0jet_detadphi', deta, dphi)
        n_filled += 1

    return n_filled
