from __future__ import annotations

import logging
import uuid
from typing import Optional

from .document import Node, TimelineDocument
from .events import EventBus, Veto, names
from .rules import walk
from .schema import Folder, Layer

logger = logging.getLogger(__name__)


class LayerTreeService:
    """Structural edits on the layer forest: add, delete, rename, move, flags."""

    def __init__(self, document: TimelineDocument, events: EventBus):
        self._document = document
        self._events = events

    def add_layer(self, name: str, parent_folder_id: Optional[str] = None) -> Optional[Layer]:
        layer = Layer(id=self._new_id("layer"), name=name)
        return self._attach(layer, parent_folder_id)

    def add_folder(self, name: str, parent_folder_id: Optional[str] = None) -> Optional[Folder]:
        folder = Folder(id=self._new_id("folder"), name=name)
        return self._attach(folder, parent_folder_id)

    def delete_object(self, node_id: str) -> bool:
        location = self._document.find_parent(node_id)
        if location is None:
            logger.warning("Object %s not found", node_id)
            return False

        if self._events.emit_cancellable(names.BEFORE_OBJECT_DELETE, {"ids": [node_id]}) is Veto.CANCELLED:
            return False

        _, siblings, idx = location
        del siblings[idx]
        logger.debug("Deleted object %s", node_id)
        self._events.emit(names.OBJECT_DELETE, {"ids": [node_id]})
        self._refresh("deleteObject")
        return True

    def rename_object(self, node_id: str, new_name: str) -> bool:
        node = self._require(node_id)
        if node is None:
            return False
        old_name = node.name
        node.name = new_name
        self._events.emit(
            names.OBJECT_RENAME, {"id": node_id, "oldName": old_name, "newName": new_name}
        )
        self._refresh("renameObject")
        return True

    def reorder_object(self, node_id: str, new_index: int) -> bool:
        location = self._document.find_parent(node_id)
        if location is None:
            logger.warning("Object %s not found", node_id)
            return False

        parent, siblings, old_index = location
        new_index = max(0, min(new_index, len(siblings) - 1))
        node = siblings.pop(old_index)
        siblings.insert(new_index, node)

        self._events.emit(
            names.OBJECT_REORDER,
            {
                "id": node_id,
                "oldIndex": old_index,
                "newIndex": new_index,
                "parentId": parent.id if parent else None,
            },
        )
        self._refresh("reorderObject")
        return True

    def reparent_object(
        self,
        node_id: str,
        new_parent_id: Optional[str],
        insert_index: Optional[int] = None,
    ) -> bool:
        location = self._document.find_parent(node_id)
        if location is None:
            logger.warning("Object %s not found", node_id)
            return False
        old_parent, siblings, idx = location
        node = siblings[idx]

        if new_parent_id is None:
            target = self._document.data.layers
        else:
            folder = self._document.find_node(new_parent_id)
            if not isinstance(folder, Folder):
                logger.warning("Target folder %s not found", new_parent_id)
                return False
            if isinstance(node, Folder) and any(n.id == new_parent_id for n in walk([node])):
                logger.warning("Cannot move %s into itself or its descendant", node_id)
                return False
            target = folder.children

        del siblings[idx]
        if insert_index is None:
            target.append(node)
        else:
            target.insert(max(0, min(insert_index, len(target))), node)

        self._events.emit(
            names.OBJECT_REPARENT,
            {
                "id": node_id,
                "oldParentId": old_parent.id if old_parent else None,
                "newParentId": new_parent_id,
            },
        )
        self._refresh("reparentObject")
        return True

    def toggle_visibility(self, node_id: str) -> bool:
        node = self._require(node_id)
        if node is None:
            return False
        node.visible = not node.visible
        self._events.emit(names.OBJECT_VISIBILITY_CHANGE, {"id": node_id, "isVisible": node.visible})
        self._refresh("toggleVisibility")
        return True

    def toggle_lock(self, node_id: str) -> bool:
        node = self._require(node_id)
        if node is None:
            return False
        node.locked = not node.locked
        self._events.emit(names.OBJECT_LOCK_CHANGE, {"id": node_id, "isLocked": node.locked})
        self._refresh("toggleLock")
        return True

    # -- helpers ---------------------------------------------------------

    def _attach(self, node: Node, parent_folder_id: Optional[str]):
        if parent_folder_id is None:
            self._document.data.layers.append(node)
        else:
            parent = self._document.find_node(parent_folder_id)
            if not isinstance(parent, Folder):
                logger.warning("Parent folder %s not found", parent_folder_id)
                return None
            parent.children.append(node)

        logger.debug("Added %s %s (%s)", node.type, node.id, node.name)
        self._events.emit(
            names.OBJECT_ADD, {"id": node.id, "type": node.type, "parentId": parent_folder_id}
        )
        self._refresh(f"add{node.type.capitalize()}")
        return node

    def _new_id(self, prefix: str) -> str:
        while True:
            candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
            if not self._document.has_id(candidate):
                return candidate

    def _require(self, node_id: str) -> Optional[Node]:
        node = self._document.find_node(node_id)
        if node is None:
            logger.warning("Object %s not found", node_id)
        return node

    def _refresh(self, source: str) -> None:
        self._events.emit(names.UI_REFRESH, {"source": source})
