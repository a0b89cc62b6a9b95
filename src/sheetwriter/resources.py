from dataclasses import asdict, fields, is_dataclass
from typing import Any, List

def strip_none(value: Any) -> Any:
    """
    Recursively drop None valued keys from dicts (and dicts inside lists).
    The Sheets client serializes None as JSON null, which for a lot of
    fields is not the same as 'not specified', so we never send them.
    """
    if isinstance(value, dict):
        return {k: strip_none(v) for k,v in value.items() if v is not None}
    if isinstance(value, list):
        return [strip_none(v) for v in value]
    return value

class GoogleWorkSpaceResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Fields left as None are treated as 'unset' and are removed from the
    dict representation.
    """
    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the GWS client, with unset (None) fields removed at every level.
        Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return strip_none(asdict(self))

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass

    def update_fields(self, **kwargs) -> List[str]:
        """
        Update fields that may be present.
        """
        updated_fields = []
        if is_dataclass(self):
            flist = fields(self)
            for k,v in kwargs.items():
                for f in flist:
                    if v is not None and k == f.name:
                        setattr(self, k, v)
                        updated_fields.append(k)
            self.fixup()
        return updated_fields
