import numpy as np
import pandas as pd
import pytest

from pagoo.core.ledger import GeneLedger
from pagoo.core.panmatrix import build_panmatrix, to_binary


@pytest.fixture
def ledger():
    genes = pd.DataFrame(
        {
            "gene": ["g1", "g2", "g3", "g1", "g2", "g1"],
            "organism": ["A", "A", "A", "B", "B", "C"],
            "cluster": ["OG1", "OG2", "OG2", "OG1", "OG3", "OG3"],
        }
    )
    return GeneLedger(genes)


def test_counts_include_paralogues(ledger):
    pm = build_panmatrix(ledger, [1, 2, 3])

    expected = np.array([[1, 2, 0], [1, 0, 1], [0, 0, 1]])
    np.testing.assert_array_equal(pm.to_numpy(), expected)
    assert pm.index.tolist() == ["A", "B", "C"]
    assert pm.columns.tolist() == ["OG1", "OG2", "OG3"]
    assert pm.index.name == "organism"
    assert pm.columns.name == "cluster"


def test_inactive_rows_removed_but_columns_kept(ledger):
    pm = build_panmatrix(ledger, [2, 3])

    assert pm.shape == (2, 3)
    assert pm["OG2"].sum() == 0
    assert pm.to_numpy().sum() == 3


def test_no_active_organisms(ledger):
    pm = build_panmatrix(ledger, [])

    assert pm.shape == (0, 3)


def test_to_binary(ledger):
    pm = build_panmatrix(ledger, [1, 2, 3])

    binary = to_binary(pm)

    assert binary.loc["A", "OG2"] == 1
    assert set(np.unique(binary.to_numpy())) <= {0, 1}
