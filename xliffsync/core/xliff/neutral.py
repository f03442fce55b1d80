"""
Neutral template generation.

The neutral document of an artifact is a language-agnostic copy of one of
its language documents: no target-language attribute, no target elements.
It is the starting point when a new language is added and is rewritten on
every run.
"""

import copy
import logging
from pathlib import Path
from typing import Union

from xliffsync.core.adapters.xml_helpers import local_name
from .document import XlfDocument

logger = logging.getLogger(__name__)


def strip_targets(document: XlfDocument) -> XlfDocument:
    """
    Return a copy of ``document`` without any target-language information.

    Args:
        document: A language document

    Returns:
        The neutral copy (unsaved, same path as the input)
    """
    tree = copy.deepcopy(document.tree)

    for node in tree.getroot().iter():
        if not isinstance(node.tag, str):
            continue
        if local_name(node) == 'file':
            for attribute in list(node.attrib):
                if local_name(attribute) == 'target-language':
                    del node.attrib[attribute]

    targets = [
        node for node in tree.getroot().iter()
        if isinstance(node.tag, str) and local_name(node) == 'target'
    ]
    for target in targets:
        target.getparent().remove(target)

    return XlfDocument(document.path, tree)


def make_neutral(input_file: Union[str, Path], output_file: Union[str, Path]) -> Path:
    """
    Write the neutral template derived from a language document.

    Any existing file at ``output_file`` is replaced.

    Args:
        input_file: A merged language document
        output_file: Destination of the neutral document

    Returns:
        The written path
    """
    neutral = strip_targets(XlfDocument.load(input_file))
    written = neutral.save(output_file)
    logger.debug(f"Neutral template {Path(output_file).name} derived from {Path(input_file).name}")
    return written
