#!/usr/bin/env python3

"""
  Angle conventions shared by every correlation variant.

  wrap_delta_phi constrains an azimuthal difference into
  [min_value, min_value + 2 pi), by default [-pi/2, 3pi/2), so that the
  near side (around 0) and the away side (around pi) are both contiguous.

  sign_flip orders a jet pair in eta: multiplying both jet etas (and every
  hadron-jet eta difference of the same event) by the flip makes the
  leading jet the one with the larger eta.
"""

import math

PI_HALF = 0.5 * math.pi
TWO_PI = 2. * math.pi

#---------------------------------------------------------------
# Constrain dphi to [min_value, min_value + 2pi)
#---------------------------------------------------------------
def wrap_delta_phi(dphi, min_value=-PI_HALF):
  max_value = min_value + TWO_PI
  if min_value <= dphi < max_value:
    return dphi

  angle = math.fmod(dphi - min_value, TWO_PI) + min_value
  while angle < min_value:
    angle += TWO_PI
  while angle >= max_value:
    angle -= TWO_PI
  # rounding at the lower edge
  if angle < min_value:
    return min_value
  return angle

#---------------------------------------------------------------
# +1 if eta1 > eta2, else -1
#---------------------------------------------------------------
def sign_flip(eta1, eta2):
  return 1. if eta1 > eta2 else -1.

#---------------------------------------------------------------
# Dijet topology requirement: |dphi| >= pi/2
#---------------------------------------------------------------
def is_back_to_back(dphi):
  return abs(dphi) >= PI_HALF
