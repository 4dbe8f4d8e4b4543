from decimal import Decimal

from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.forms import TailwindFormMixin

from .costing import CostingForm, ItemDraft, LaborDraft, MaterialDraft
from .metrics import line_total, to_decimal
from .models import MaterialCategory, MaterialOrderStatus, ProductionItem
from .repository import ITEM_FIELDS

MAX_LINE_TOTAL = Decimal("10000000000")

_DATE_WIDGET = {"attrs": {"type": "date"}, "format": "%Y-%m-%d"}


class ProductionItemCreateForm(TailwindFormMixin, forms.ModelForm):
    """New card from the board header; status always starts at the first stage."""

    class Meta:
        model = ProductionItem
        fields = [
            "season",
            "model_code",
            "model_name",
            "manufacturer",
            "category",
            "target_loading_date",
            "po_date",
            "planned_qty",
        ]
        widgets = {
            "target_loading_date": forms.DateInput(**_DATE_WIDGET),
            "po_date": forms.DateInput(**_DATE_WIDGET),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["po_date"].required = False
        self.fields["po_date"].initial = timezone.localdate

    def clean_po_date(self):
        return self.cleaned_data.get("po_date") or timezone.localdate()


class CostingItemForm(TailwindFormMixin, forms.ModelForm):
    """Item half of the costing page. Only cleaned_data is used; saving goes through CostingForm."""

    class Meta:
        model = ProductionItem
        fields = list(ITEM_FIELDS)
        widgets = {
            "target_loading_date": forms.DateInput(**_DATE_WIDGET),
            "po_date": forms.DateInput(**_DATE_WIDGET),
            "fabric_arrival_date": forms.DateInput(**_DATE_WIDGET),
            "cutting_date": forms.DateInput(**_DATE_WIDGET),
            "actual_mfg_deadline": forms.DateInput(**_DATE_WIDGET),
            "sizes_breakdown": forms.Textarea(attrs={"rows": 2}),
        }

    def clean_sizes_breakdown(self):
        sizes = self.cleaned_data.get("sizes_breakdown") or {}
        if not isinstance(sizes, dict):
            raise forms.ValidationError(_('Enter sizes as {"S": 50, "M": 100}.'))
        try:
            return {str(label): int(count) for label, count in sizes.items()}
        except (TypeError, ValueError):
            raise forms.ValidationError(_("Size counts must be whole numbers."))


class MaterialRowForm(TailwindFormMixin, forms.Form):
    compact = True

    id = forms.CharField(required=False, widget=forms.HiddenInput)
    material_type = forms.ChoiceField(choices=MaterialCategory.choices)
    supplier = forms.CharField(required=False, max_length=150)
    quality = forms.CharField(required=False, max_length=150)
    unit_consumption = forms.DecimalField(min_value=0, max_digits=10, decimal_places=3, initial=0)
    unit_price = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2, initial=0)
    # Entered as a percentage, stored as a fraction
    waste_percent = forms.DecimalField(min_value=0, max_digits=6, decimal_places=2, initial=0)
    order_status = forms.ChoiceField(choices=MaterialOrderStatus.choices, initial=MaterialOrderStatus.PENDING)
    notes = forms.CharField(required=False, widget=forms.TextInput)

    def clean(self):
        cleaned_data = super().clean()
        consumption = cleaned_data.get("unit_consumption")
        price = cleaned_data.get("unit_price")
        waste_percent = cleaned_data.get("waste_percent")
        if None not in (consumption, price, waste_percent):
            # total_amount column: 12 digits, 2 of them decimals
            if line_total(consumption, price, waste_percent / 100) >= MAX_LINE_TOTAL:
                raise forms.ValidationError(_("Line total is too large."))
        return cleaned_data

    @property
    def is_accessory_row(self):
        return self["material_type"].value() == MaterialCategory.ACCESSORY

    def to_draft(self):
        data = dict(self.cleaned_data)
        waste_percent = data.pop("waste_percent") or Decimal("0")
        draft = MaterialDraft(waste_rate=waste_percent / 100, **data)
        draft.recalculate()
        return draft

    @staticmethod
    def initial_for(row):
        initial = {name: value for name, value in row.items() if name not in ("waste_rate", "total_amount")}
        initial["waste_percent"] = (to_decimal(row["waste_rate"]) * 100).quantize(Decimal("0.01"))
        return initial


class LaborRowForm(TailwindFormMixin, forms.Form):
    compact = True

    id = forms.CharField(required=False, widget=forms.HiddenInput)
    operation_name = forms.CharField(required=False, max_length=150)
    cost_amount = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2, initial=0)

    def to_draft(self):
        return LaborDraft(**self.cleaned_data)


MaterialFormSet = forms.formset_factory(MaterialRowForm, extra=0)
LaborFormSet = forms.formset_factory(LaborRowForm, extra=0)


class CostingForms:
    """The three Django forms behind one costing page, bound or seeded from a draft."""

    def __init__(self, data=None, costing=None):
        if data is not None:
            self.item_form = CostingItemForm(data, prefix="item")
            self.material_formset = MaterialFormSet(data, prefix="materials")
            self.labor_formset = LaborFormSet(data, prefix="labor")
        else:
            initial = costing.initial_data()
            self.item_form = CostingItemForm(initial=initial["item"], prefix="item")
            self.material_formset = MaterialFormSet(
                initial=[MaterialRowForm.initial_for(row) for row in initial["materials"]],
                prefix="materials",
            )
            self.labor_formset = LaborFormSet(initial=initial["labor_costs"], prefix="labor")

    def is_valid(self):
        # Evaluate all three so every form carries its errors
        results = [self.item_form.is_valid(), self.material_formset.is_valid(), self.labor_formset.is_valid()]
        return all(results)

    def to_costing(self, repository, item_id):
        item = ItemDraft(id=item_id, **{name: self.item_form.cleaned_data[name] for name in ITEM_FIELDS})
        return CostingForm(
            repository,
            item,
            [form.to_draft() for form in self.material_formset],
            [form.to_draft() for form in self.labor_formset],
        )
