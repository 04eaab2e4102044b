"""Value types shared by the header and message layers"""

from .address import Address, AddrSpec, Group, Mailbox, format_address_list
from .line_break import Break
from .param_value import (
    ParameterNotFoundError,
    ParamValue,
    ParamValueParseError,
    change,
    delete_param,
    modify,
    set_param,
)

__all__ = [
    "Address",
    "AddrSpec",
    "Group",
    "Mailbox",
    "format_address_list",
    "Break",
    "ParamValue",
    "ParamValueParseError",
    "ParameterNotFoundError",
    "change",
    "delete_param",
    "modify",
    "set_param",
]
