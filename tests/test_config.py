"""Tests for configuration and workload generation"""

import pytest
import numpy as np
from driver_matching.config import MatcherConfig, get_config, set_config, load_config
from driver_matching.errors import ConfigurationError
from driver_matching.core.workload import random_placements, random_queries, apply_placements
from driver_matching.spatial.linear_scan import LinearScanMatcher


class TestMatcherConfig:
    def test_defaults_are_valid(self):
        config = MatcherConfig().validate()
        assert config.BUCKET_SIZE == 32
        assert config.STRATEGY == "bucket"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "grid:\n"
            "  width: 80\n"
            "  height: 60\n"
            "  bucket_size: 8\n"
            "matcher:\n"
            "  strategy: ring\n"
            "workload:\n"
            "  agents: 500\n"
            "  seed: 123\n"
            "events:\n"
            "  enabled: true\n"
            "  compress: false\n"
        )

        config = MatcherConfig.from_yaml(str(path))
        assert (config.GRID_WIDTH, config.GRID_HEIGHT, config.BUCKET_SIZE) == (80, 60, 8)
        assert config.STRATEGY == "ring"
        assert config.AGENT_COUNT == 500
        assert config.SEED == 123
        assert config.EVENT_LOG_ENABLED is True
        assert config.EVENT_LOG_COMPRESS is False
        # Untouched keys keep defaults
        assert config.QUERY_COUNT == MatcherConfig.QUERY_COUNT
        assert config.EVENT_LOG_DIR == MatcherConfig.EVENT_LOG_DIR

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert MatcherConfig.from_yaml(str(path)).to_dict() == MatcherConfig().to_dict()

    @pytest.mark.parametrize("field,value", [
        ("GRID_WIDTH", 0),
        ("GRID_HEIGHT", -5),
        ("BUCKET_SIZE", 0),
        ("STRATEGY", "quadtree"),
        ("AGENT_COUNT", -1),
        ("AGENT_COUNT", 2000 * 2000 + 1),
    ])
    def test_validate_rejects(self, field, value):
        config = MatcherConfig()
        setattr(config, field, value)
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_to_dict(self):
        data = MatcherConfig().to_dict()
        assert data['GRID_WIDTH'] == 2000
        assert data['STRATEGY'] == 'bucket'

    def test_global_config(self, tmp_path):
        custom = MatcherConfig()
        custom.GRID_WIDTH = 10
        set_config(custom)
        assert get_config() is custom

        path = tmp_path / "c.yaml"
        path.write_text("grid:\n  width: 33\n")
        loaded = load_config(str(path))
        assert get_config() is loaded
        assert loaded.GRID_WIDTH == 33

        set_config(MatcherConfig())


class TestWorkload:
    def test_placements_on_distinct_cells(self):
        placements = random_placements(80, 80, 500, np.random.default_rng(123))

        assert [p[0] for p in placements] == list(range(1, 501))
        cells = {(x, y) for _, x, y in placements}
        assert len(cells) == 500
        assert all(0 <= x < 80 and 0 <= y < 80 for x, y in cells)

    def test_placements_reproducible(self):
        a = random_placements(30, 20, 50, np.random.default_rng(1))
        b = random_placements(30, 20, 50, np.random.default_rng(1))
        assert a == b

    def test_fill_entire_grid(self):
        placements = random_placements(4, 3, 12, np.random.default_rng(0), first_id=100)
        assert {(x, y) for _, x, y in placements} == {(x, y) for x in range(4) for y in range(3)}
        assert placements[0][0] == 100

    def test_too_many_agents(self):
        with pytest.raises(ConfigurationError):
            random_placements(3, 3, 10)

    def test_queries_in_bounds(self):
        queries = random_queries(7, 5, 200, np.random.default_rng(2))
        assert len(queries) == 200
        assert all(0 <= x < 7 and 0 <= y < 5 for x, y in queries)

    def test_apply_placements(self):
        matchers = [LinearScanMatcher(10, 10), LinearScanMatcher(10, 10)]
        apply_placements(matchers, [(1, 0, 0), (2, 3, 3)])
        for matcher in matchers:
            assert len(matcher) == 2
            assert matcher.position_of(2) == (3, 3)
