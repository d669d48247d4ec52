"""
值对象基类。
"""
from typing import Any, Dict


class ValueObject:
    """
    按属性值判等的对象，创建后不再修改。
    子类通过 _equality_fields 声明参与比较的属性。
    """

    def _equality_fields(self) -> Dict[str, Any]:
        return dict(vars(self))

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._equality_fields() == other._equality_fields()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._equality_fields().items())))

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self._equality_fields().items())
        return f"{type(self).__name__}({fields})"
