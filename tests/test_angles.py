import math

import numpy as np
import pytest

from pyjethadron.correlation import PI_HALF, TWO_PI, wrap_delta_phi, sign_flip, is_back_to_back

VALUES = np.linspace(-25., 25., 2001)

def test_wrap_in_range_unchanged():
  for dphi in [-1.5, 0., 0.3, math.pi, 4.7]:
    assert wrap_delta_phi(dphi) == dphi

def test_wrap_range():
  for dphi in VALUES:
    wrapped = wrap_delta_phi(dphi)
    assert -PI_HALF <= wrapped < 1.5 * math.pi

def test_wrap_idempotent():
  for dphi in VALUES:
    wrapped = wrap_delta_phi(dphi)
    assert wrap_delta_phi(wrapped) == wrapped

def test_wrap_shifts_by_full_turns():
  for dphi in VALUES:
    turns = (wrap_delta_phi(dphi) - dphi) / TWO_PI
    assert turns == pytest.approx(round(turns), abs=1e-9)

def test_wrap_known_values():
  assert wrap_delta_phi(-math.pi) == pytest.approx(math.pi)
  assert wrap_delta_phi(-2.) == pytest.approx(TWO_PI - 2.)
  assert wrap_delta_phi(5.) == pytest.approx(5. - TWO_PI)
  assert wrap_delta_phi(0.2 + 3 * TWO_PI) == pytest.approx(0.2)

def test_wrap_custom_minimum():
  assert wrap_delta_phi(-0.5, 0.) == pytest.approx(TWO_PI - 0.5)
  assert wrap_delta_phi(1., 0.) == 1.

def test_sign_flip_orders_etas():
  for eta1, eta2 in [(0.5, -0.2), (-0.2, 0.5), (0.1, 0.6), (-0.6, -0.1), (0.3, 0.3)]:
    flip = sign_flip(eta1, eta2)
    assert flip in (1., -1.)
    assert flip * eta1 >= flip * eta2

def test_sign_flip_values():
  assert sign_flip(0.5, 0.1) == 1.
  assert sign_flip(0.1, 0.5) == -1.
  assert sign_flip(0.2, 0.2) == -1.

def test_back_to_back():
  assert is_back_to_back(math.pi)
  assert is_back_to_back(-2.)
  assert is_back_to_back(PI_HALF)
  assert not is_back_to_back(0.3)
  assert not is_back_to_back(-1.5)
