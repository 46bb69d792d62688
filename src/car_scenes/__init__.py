"""car_scenes package."""

from .config import RuntimeConfig, load_runtime_config
from .drawing import Layout
from .ingestion import DatasetLoadError, DatasetLoader, EmptyDatasetError, Record
from .navigation import NavigationController, build_controller
from .renderer import LegendRenderer, SceneRenderer
from .scales import LinearScale, Scales, build_scales
from .scenes import LegendEntry, SceneDescriptor, build_scenes
from .surface import RecordingSurface, SvgSurface
from .tooltip import TooltipController

__all__ = [
    "DatasetLoadError",
    "DatasetLoader",
    "EmptyDatasetError",
    "Layout",
    "LegendEntry",
    "LegendRenderer",
    "LinearScale",
    "NavigationController",
    "Record",
    "RecordingSurface",
    "RuntimeConfig",
    "SceneDescriptor",
    "SceneRenderer",
    "Scales",
    "StoryBuilder",
    "SvgSurface",
    "TooltipController",
    "build_controller",
    "build_scales",
    "build_scenes",
    "load_runtime_config",
]


def __getattr__(name: str) -> object:
    if name == "StoryBuilder":
        try:
            from .reporting import StoryBuilder as _StoryBuilder
        except ImportError as exc:
            raise ImportError(
                "StoryBuilder requires jinja2 and plotly. "
                "Install with: pip install car-scenes"
            ) from exc
        return _StoryBuilder
    raise AttributeError(name)
