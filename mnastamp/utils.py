from collections.abc import Hashable

from mnastamp.netlist import Netlist, element_type
from mnastamp.registry import BranchId


def update_element_value(netlist: Netlist, name: str, new_value: float) -> Netlist:
    """Returns a copy of ``netlist`` with the value of one element replaced.
    """
    bucket_name = element_type(name).value
    if name not in getattr(netlist, bucket_name):
        raise KeyError(f"Element '{name}' is not in the netlist")

    buckets = {b: dict(getattr(netlist, b)) for b in ("v", "r", "c", "l")}
    buckets[bucket_name][name] = buckets[bucket_name][name]._replace(value=float(new_value))
    return Netlist(**buckets)


def branch_label(key: Hashable) -> str:
    """``V(n)`` for node ids, ``I(name)`` for branch currents."""
    if isinstance(key, BranchId):
        return f"I({key.element})" if key.element else f"I(#{key.serial})"
    return f"V({key})"
