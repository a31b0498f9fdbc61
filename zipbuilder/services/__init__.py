"""Release assembly services.

Each service owns one pipeline stage and returns Result values; the
ReleasePipeline sequences them.
"""

from .archive import zip_contents
from .builder import CommandReleaseBuilder, ReleaseArtifacts, ReleaseBuilder
from .cache import invalidate_cache
from .carthage import generate_carthage_release, package_carthage
from .errors import PipelineError
from .output import PlacedOutputs, place_outputs
from .pipeline import FinalArtifacts, ReleasePipeline
from .pods import update_pod_repos
from .resources import move_all_bundles, relocate_resources

__all__ = [
    "CommandReleaseBuilder",
    "FinalArtifacts",
    "PipelineError",
    "PlacedOutputs",
    "ReleaseArtifacts",
    "ReleaseBuilder",
    "ReleasePipeline",
    "generate_carthage_release",
    "invalidate_cache",
    "move_all_bundles",
    "package_carthage",
    "place_outputs",
    "relocate_resources",
    "update_pod_repos",
    "zip_contents",
]
