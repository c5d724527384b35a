import numpy as np
import pandas as pd
import pytest

from pagoo.core.classifier import classify, effective_presence


def make_pm(rows, columns=None):
    rows = np.asarray(rows)
    columns = columns or [f"c{i + 1}" for i in range(rows.shape[1])]
    return pd.DataFrame(
        rows,
        index=[f"o{i + 1}" for i in range(rows.shape[0])],
        columns=columns,
    )


def test_core_shell_cloud_and_absent():
    pm = make_pm(
        [
            [1, 1, 1, 0],
            [1, 0, 1, 0],
            [2, 0, 0, 0],
            [1, 0, 0, 0],
        ]
    )

    result = classify(pm, core_level=95)

    assert result.labels.tolist() == ["core", "cloud", "shell", None]
    assert result.presence.tolist() == [4, 1, 2, 0]
    assert result.n_organisms == 4


def test_summary_excludes_unlabelled_clusters():
    pm = make_pm([[1, 1, 0], [1, 0, 0]])

    summary = classify(pm, core_level=95).summary_stats()

    assert summary["Category"].tolist() == ["Total", "Core", "Shell", "Cloud"]
    assert summary["Number"].tolist() == [2, 1, 0, 1]


def test_core_threshold_boundary_is_inclusive():
    # 19 of 20 organisms is exactly 95 percent
    rows = np.ones((20, 2), dtype=int)
    rows[0, 0] = 0
    rows[:2, 1] = 0
    pm = make_pm(rows)

    result = classify(pm, core_level=95)

    assert result.labels.tolist() == ["core", "shell"]


def test_singleton_beats_core():
    pm = make_pm([[1, 2, 0]])

    result = classify(pm, core_level=95)

    assert result.labels.tolist() == ["cloud", "core", None]


def test_clonal_rule_collapses_identical_organisms():
    pm = make_pm(
        [
            [1, 1, 1, 0],
            [1, 1, 1, 0],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
        ]
    )

    singleton = classify(pm, core_level=95, cloud_rule="singleton")
    clonal = classify(pm, core_level=95, cloud_rule="clonal")

    assert singleton.labels.tolist() == ["core", "shell", "shell", "shell"]
    assert clonal.labels.tolist() == ["core", "cloud", "cloud", "cloud"]
    assert effective_presence(pm).tolist() == [2, 1, 1, 1]


def test_clusters_in_and_counts():
    pm = make_pm([[1, 1, 1], [1, 0, 1], [1, 0, 0]], columns=["x", "y", "z"])

    result = classify(pm, core_level=95)

    assert result.clusters_in("core") == ["x"]
    assert result.clusters_in("shell") == ["z"]
    assert result.clusters_in("cloud") == ["y"]
    assert result.counts() == {"core": 1, "shell": 1, "cloud": 1}


def test_unknown_category():
    result = classify(make_pm([[1]]), core_level=95)

    with pytest.raises(ValueError, match="Unknown category"):
        result.clusters_in("accessory")


def test_unknown_cloud_rule():
    with pytest.raises(ValueError, match="Unknown cloud_rule"):
        classify(make_pm([[1]]), core_level=95, cloud_rule="rare")
