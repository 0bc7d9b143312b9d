"""Map generation configuration models."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

# Largest seed accepted; seeds are unsigned 32-bit values
MAX_SEED = 2**32 - 1

# Bundled TOML presets
CONFIGS_DIR = Path(__file__).parent.parent / "configs"


class MapConfig(BaseModel):
    """Complete map generation configuration."""

    seed: int = Field(default=42, ge=0, le=MAX_SEED, description="Seed for reproducibility")
    width: int = Field(default=256, gt=0, description="Grid width in cells")
    height: int = Field(default=256, gt=0, description="Grid height in cells")

    sea_level: float = Field(
        default=0.48,
        allow_inf_nan=False,
        description="Elevation at or below which cells are water",
    )
    elevation_amplitude: float = Field(
        default=0.9,
        allow_inf_nan=False,
        description="Weight of fractal noise against continentality",
    )
    warp_strength: float = Field(
        default=80.0,
        allow_inf_nan=False,
        description="Domain warp strength (offset = warp * strength / 400)",
    )
    erosion_iterations: int = Field(
        default=2, ge=0, description="Number of thermal erosion passes"
    )
    moisture_scale: float = Field(
        default=1.0,
        allow_inf_nan=False,
        description="Cap on noise moisture and divisor for moisture enhancement",
    )


def load_config(config_path: Path) -> MapConfig:
    """Load map configuration from a TOML file.

    The file holds a single ``[map]`` table whose keys mirror MapConfig.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed MapConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If a value is out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return MapConfig.model_validate(data.get("map", {}))


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. cartograph/configs/{name}.toml
    3. cartograph/configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    config_path = CONFIGS_DIR / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = CONFIGS_DIR / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {CONFIGS_DIR}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available preset names."""
    if not CONFIGS_DIR.exists():
        return []
    return sorted(p.stem for p in CONFIGS_DIR.glob("*.toml"))
