from nodepad.pages.content import ContentStore
from nodepad.pages.mutator import EntityMutator
from nodepad.pages.name_validator import NameValidator
from nodepad.pages.path_resolver import PathResolver
from nodepad.pages.search import SearchEngine
from nodepad.pages.tag_store import TagStore
from nodepad.pages.tree_builder import TreeBuilder

__all__ = [
    "ContentStore",
    "EntityMutator",
    "NameValidator",
    "PathResolver",
    "SearchEngine",
    "TagStore",
    "TreeBuilder",
]
