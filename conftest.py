import numpy as np
import pandas as pd
import pytest


# -- Shared fixtures --------------------------------------------------------

N = 20
D = 5


@pytest.fixture
def rng():
    return np.random.RandomState(42)


@pytest.fixture
def compositions(rng):
    """Random compositions on the 5-part simplex."""
    return rng.dirichlet(np.ones(D), size=N)


@pytest.fixture
def compositions_df(compositions):
    """Same compositions with sample and component labels."""
    return pd.DataFrame(
        compositions,
        index=["sample_{}".format(i) for i in range(N)],
        columns=list("abcde"),
    )


@pytest.fixture
def sbp4():
    """Sequential binary partition for 4 parts."""
    return np.array([
        [1, 1, 0],
        [1, -1, 0],
        [-1, 0, 1],
        [-1, 0, -1],
    ])
