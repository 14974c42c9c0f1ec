from .view_widget import GardenViewWidget

__all__ = ["GardenViewWidget"]
