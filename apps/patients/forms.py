# apps/patients/forms.py
from django import forms


class DeleteReasonForm(forms.Form):
    reason = forms.CharField(
        required=True,
        max_length=500,
        label="Kindly provide a reason",
        error_messages={"required": "A reason is required to delete this record."},
        widget=forms.Textarea(attrs={
            "rows": 3,
            "class": "w-full rounded-xl ring-1 ring-[#014D88] px-4 py-2",
        }),
    )

    def clean_reason(self):
        reason = (self.cleaned_data.get("reason") or "").strip()
        if not reason:
            raise forms.ValidationError("A reason is required to delete this record.")
        return reason
