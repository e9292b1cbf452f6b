import numpy as np
import pytest

from sigtools.signal import Channel, Signal, SignalError


def test_channel_values_are_scaled():
    ch = Channel([1, -2, 3], scale=0.5)
    assert ch.values().tolist() == [0.5, -1.0, 1.5]
    assert ch.data.dtype == np.int16


def test_signal_counts():
    sig = Signal([Channel([1, 2, 3]), Channel([4, 5, 6])], dt=0.1)
    assert sig.n_points() == 3
    assert sig.n_channels() == 2


def test_empty_signal():
    sig = Signal()
    assert sig.n_points() == 0
    assert sig.n_channels() == 0


def test_unequal_channels_rejected():
    with pytest.raises(SignalError):
        Signal([Channel([1, 2]), Channel([1, 2, 3])])


def test_two_dimensional_data_rejected():
    with pytest.raises(SignalError):
        Channel([[1, 2], [3, 4]])