import numpy as np
import pandas as pd
import pytest

from pagoo.stats import (
    ExpDecayFit,
    PowerLawFit,
    cg_exp_decay_fit,
    melt_rarefaction,
    pg_power_law_fit,
)


@pytest.fixture
def power_law_raref():
    x = np.arange(1, 11)
    values = 3.0 * x ** 0.5
    return pd.DataFrame(
        {"permut_1": values, "permut_2": values},
        index=pd.Index(x, name="genomes"),
    )


def test_melt_rarefaction(power_law_raref):
    x, y = melt_rarefaction(power_law_raref)

    assert x.shape == y.shape == (20,)
    assert x[:4].tolist() == [1.0, 1.0, 2.0, 2.0]


def test_power_law_recovers_parameters(power_law_raref):
    fit = pg_power_law_fit(raref=power_law_raref)

    assert isinstance(fit, PowerLawFit)
    np.testing.assert_allclose(fit.K, 3.0)
    np.testing.assert_allclose(fit.delta, 0.5)
    np.testing.assert_allclose(fit.alpha, 0.5)
    np.testing.assert_allclose(fit(4), 6.0)


def test_exp_decay_fit():
    x = np.arange(1, 11)
    values = np.round(40 * np.exp(-0.6 * x)) + 12
    raref = pd.DataFrame({"permut_1": values}, index=pd.Index(x, name="genomes"))

    fit = cg_exp_decay_fit(raref=raref, pcounts=10)

    assert isinstance(fit, ExpDecayFit)
    assert fit.C == values.min()
    assert fit.B < 0
    assert fit.pseudo_counts == 10
    assert set(fit.params) == {"A", "B", "C"}


def test_fits_from_pangenome(pangenome):
    pan_fit = pg_power_law_fit(pangenome, n_perm=10, seed=1)
    core_fit = pangenome.stats.cg_exp_decay_fit(n_perm=10, seed=1)

    assert pan_fit.delta > 0
    assert core_fit.C == 1


def test_fit_needs_data():
    with pytest.raises(ValueError, match="rarefaction table"):
        pg_power_law_fit()
    with pytest.raises(ValueError, match="rarefaction table"):
        cg_exp_decay_fit()
