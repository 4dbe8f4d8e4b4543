"""Shared form utilities for the production tracker."""

from django import forms


_INPUT_CLASSES = (
    "w-full border border-slate-300 rounded-lg px-3 py-2 text-sm "
    "focus:outline-none focus:ring-2 focus:ring-emerald-500 focus:border-transparent"
)
# Costing tables are mostly numbers; right-align them so decimals line up
_NUMBER_CLASSES = _INPUT_CLASSES + " text-right font-mono"
_COMPACT_CLASSES = "w-full border border-slate-200 rounded px-2 py-1 text-xs"


class TailwindFormMixin:
    """
    Injects Tailwind CSS classes into every widget in the form.

    Set ``compact = True`` on row forms rendered inside costing tables.
    """

    compact = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            widget = field.widget
            if isinstance(widget, forms.HiddenInput):
                continue
            if self.compact:
                widget.attrs.setdefault("class", _COMPACT_CLASSES)
            elif isinstance(widget, forms.NumberInput):
                widget.attrs.setdefault("class", _NUMBER_CLASSES)
            elif isinstance(widget, forms.Textarea):
                widget.attrs.setdefault("class", _INPUT_CLASSES + " resize-none")
            elif isinstance(widget, forms.Select):
                widget.attrs.setdefault("class", _INPUT_CLASSES + " bg-white")
            else:
                widget.attrs.setdefault("class", _INPUT_CLASSES)
