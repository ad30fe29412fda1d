"""
V8 build: GN argument assembly, GN/Ninja invocation and cargo directives.
"""

from .args import GnArgs, assemble_gn_args
from .directives import DirectiveWriter, LinkDirective, link_directives
from .invoker import GnBuilder
from .pipeline import BuildPipeline

__all__ = [
    "GnArgs",
    "assemble_gn_args",
    "DirectiveWriter",
    "LinkDirective",
    "link_directives",
    "GnBuilder",
    "BuildPipeline",
]
