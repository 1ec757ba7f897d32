# Rev 1.0.0
from __future__ import annotations

from typing import Any, List

from flowdesk.errors import ValidationError
from flowdesk.models.entities import Member
from flowdesk.services.forms import member_payload
from flowdesk.viewmodels.base_viewmodel import CrudViewModel


class MembersViewModel(CrudViewModel):
    def list_members(self) -> List[Member]:
        return list(self._store.members)

    def add_member(self, name: str) -> bool:
        try:
            payload = member_payload(name)
        except ValidationError:
            return False
        self._write(self._backend.insert, "members", payload)
        return True

    def delete_member(self, member_id: Any) -> bool:
        # tasks assigned to this name are left untouched
        self._write(self._backend.delete, "members", member_id)
        return True
