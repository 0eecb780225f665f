"""Shared fixtures for the ROI Navigator test suite."""

import pytest

from engines.reference import default_inputs, default_params


@pytest.fixture
def inputs():
    """Fresh copy of the enterprise default input groups."""
    return default_inputs()


@pytest.fixture
def params():
    return default_params()


@pytest.fixture
def example_inputs(inputs):
    """$500M revenue, 7.7% budget, 200 people at $180k loaded cost."""
    inputs['org'].update(annualRevenue=500_000_000, marketingBudgetPct=7.7,
                         marketingHeadcount=200, avgLoadedFteCost=180_000)
    return inputs


def engine_args(inputs):
    return (inputs['org'], inputs['martech'], inputs['ops'], inputs['pain'],
            inputs['investment'], inputs['assumptions'])


@pytest.fixture
def args(inputs):
    return engine_args(inputs)


@pytest.fixture
def to_args():
    """Positional engine arguments for an input-group dict."""
    return engine_args
