"""
XML Processing Utilities
========================

Tree construction and namespace-agnostic lookup used by the encoders and the
reader.
"""

from deposit_core.xml.builder import (
    element,
    resolve_name,
    to_xml,
    NAMESPACES,
    XSI_NS,
    JATS_NS,
    AI_NS,
    FR_NS,
    MML_NS,
    XLINK_NS,
    REL_NS,
)

from deposit_core.xml.utils import (
    local_name,
    child_elements,
    find_first,
    find_all,
    text_content,
    qualify_tree,
)

__all__ = [
    "element",
    "resolve_name",
    "to_xml",
    "NAMESPACES",
    "XSI_NS",
    "JATS_NS",
    "AI_NS",
    "FR_NS",
    "MML_NS",
    "XLINK_NS",
    "REL_NS",
    "local_name",
    "child_elements",
    "find_first",
    "find_all",
    "text_content",
    "qualify_tree",
]
