"""Utils package initialization."""
from review_radar.utils.logger import get_logger, LayerLogger, NullLayerLogger

__all__ = ["get_logger", "LayerLogger", "NullLayerLogger"]
