"""
Swatch extraction by clustering pixels in a color+position space.
"""

from loguru import logger

from .cluster import Cluster, ClusteringAlgorithm
from .config import ExtractionConfig
from .dbscan import DBSCAN, DBSCANPlusPlus
from .dendrogram import Dendrogram, Step
from .distance import absolute, checked, euclidean, squared_euclidean, to_distance
from .distance_matrix import DistanceMatrix
from .errors import IndexOutOfBoundsError, PaletteClusterError, StateError, ValidationError
from .extractor import Position, Swatch, SwatchExtractor
from .filters import compose_filters, luminance_filter, opacity_filter
from .hierarchical import DendrogramClustering, HierarchicalClustering
from .image import ArrayImage, ImageData, PillowImage, RawImage, read_image
from .kdtree import KDTreeSearch
from .kmeans import KMeans, KMeansPlusPlusInitializer
from .lfu_cache import LFUCache
from .linear_search import LinearSearch
from .log import configure_logging
from .neighbor import Neighbor, NeighborSearch
from .palette import Palette
from .pipeline import PaletteSwatch, extract_palette
from .point import Point, Vector, as_point_array, to_point
from .priority_queue import PriorityQueue
from .sampling import FarthestPointSampling, RandomSampling, WeightedFarthestPointSampling

__version__ = '0.1.0'

logger.disable('palette_cluster')
