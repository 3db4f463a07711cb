"""Tests for timeout tiers."""

import pytest

from bankline.config import Settings
from bankline.resilience.timeout import (
    BASE_TIMEOUT,
    EXTENDED_TIMEOUT,
    TRANSFER_TIMEOUT,
    TimeoutConfig,
    TimeoutTier,
)


class TestPredefinedTimeouts:
    """Test predefined timeout constants."""

    def test_base_timeout(self):
        """Test base tier is 10 seconds."""
        assert BASE_TIMEOUT == 10.0

    def test_extended_timeout(self):
        """Test extended tier is 15 seconds."""
        assert EXTENDED_TIMEOUT == 15.0

    def test_transfer_timeout(self):
        """Test transfer tier is 20 seconds."""
        assert TRANSFER_TIMEOUT == 20.0


class TestTimeoutConfig:
    """Test TimeoutConfig dataclass."""

    def test_default_values(self):
        """Test default configuration values."""
        config = TimeoutConfig()
        assert config.base == 10.0
        assert config.extended == 15.0
        assert config.transfer == 20.0

    def test_from_settings(self):
        """Test building from settings."""
        settings = Settings(base_timeout=1.0, extended_timeout=2.0, transfer_timeout=3.0)
        config = TimeoutConfig.from_settings(settings)
        assert (config.base, config.extended, config.transfer) == (1.0, 2.0, 3.0)

    @pytest.mark.parametrize(
        "tier,expected",
        [
            (TimeoutTier.BASE, 10.0),
            (TimeoutTier.EXTENDED, 15.0),
            (TimeoutTier.TRANSFER, 20.0),
            (None, None),
        ],
    )
    def test_resolve(self, tier, expected):
        """Test resolving each tier."""
        assert TimeoutConfig().resolve(tier) == expected

    def test_transfer_tier_is_larger_than_extended(self):
        """Test transfers get more budget than other retries."""
        config = TimeoutConfig()
        assert config.resolve(TimeoutTier.TRANSFER) > config.resolve(TimeoutTier.EXTENDED)

    def test_frozen(self):
        """Test configs are immutable."""
        config = TimeoutConfig()
        with pytest.raises(Exception):
            config.base = 1.0
