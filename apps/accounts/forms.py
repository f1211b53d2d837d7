# apps/accounts/forms.py
from django import forms

from .session import parse_permissions


class SessionHandoffForm(forms.Form):
    """
    The host application posts the collaborator credential here once the user
    has signed in over there. Permissions arrive as a comma separated list.
    """

    token = forms.CharField(
        required=True,
        label="Access token",
        widget=forms.PasswordInput(attrs={
            "autocomplete": "off",
            "class": "w-full rounded-xl ring-1 ring-gray-300 px-4 py-2",
        }),
    )
    permissions = forms.CharField(
        required=False,
        label="Permissions",
        widget=forms.TextInput(attrs={
            "placeholder": "view_patient, edit_patient",
            "class": "w-full rounded-xl ring-1 ring-gray-300 px-4 py-2",
        }),
    )
    username = forms.CharField(
        required=False,
        max_length=150,
        widget=forms.TextInput(attrs={"class": "w-full rounded-xl ring-1 ring-gray-300 px-4 py-2"}),
    )

    def clean_token(self):
        token = self.cleaned_data["token"].strip()
        if token.lower().startswith("bearer "):
            token = token[7:].strip()
        if not token:
            raise forms.ValidationError("A token is required.")
        return token

    def clean_permissions(self):
        return parse_permissions(self.cleaned_data.get("permissions"))
