#!/usr/bin/env python3

"""
  Streaming selection of the leading and subleading jet of an event.

  Jets are ranked by their rho-area subtracted transverse momentum
  ptCorr = pt - rho * area. A single pass keeps the running top two; a jet
  with the same ptCorr as the current leading (subleading) jet does not
  displace it, so the result matches a stable descending sort.
"""

################################################################
class LeadingPair(object):
  __slots__ = ('leading', 'subleading', 'pt_leading_corr', 'pt_subleading_corr')

  def __init__(self, leading, subleading, pt_leading_corr, pt_subleading_corr):
    self.leading = leading
    self.subleading = subleading
    self.pt_leading_corr = pt_leading_corr
    self.pt_subleading_corr = pt_subleading_corr

  def asymmetry(self):
    return self.pt_subleading_corr / self.pt_leading_corr if self.pt_leading_corr != 0. else 0.

  def __repr__(self):
    return 'LeadingPair(leading={}, subleading={}, ptCorr=({:.3f}, {:.3f}))'.format(
      self.leading, self.subleading, self.pt_leading_corr, self.pt_subleading_corr)

#---------------------------------------------------------------
# Return the LeadingPair of the accepted jets, or None if fewer than two
# jets are accepted.
#
#   is_accepted(jet) -> bool    acceptance predicate (None accepts all)
#   on_accepted(jet, ptCorr)    called for every accepted jet
#---------------------------------------------------------------
def find_leading_pair(jets, rho, is_accepted=None, on_accepted=None):

  leading = None
  subleading = None
  pt_leading_corr = None
  pt_subleading_corr = None

  for jet in jets:
    if is_accepted is not None and not is_accepted(jet):
      continue

    pt_corr = jet.pt_corr(rho)
    if on_accepted is not None:
      on_accepted(jet, pt_corr)

    if leading is None or pt_corr > pt_leading_corr:
      subleading, pt_subleading_corr = leading, pt_leading_corr
      leading, pt_leading_corr = jet, pt_corr
    elif subleading is None or pt_corr > pt_subleading_corr:
      subleading, pt_subleading_corr = jet, pt_corr

  if subleading is None:
    return None
  return LeadingPair(leading, subleading, pt_leading_corr, pt_subleading_corr)
