"""
Forms for account registration and password changes.

The API posts JSON; views bind the parsed dict to these forms so the usual
Django validation (password validators, unique email) applies.
"""
from django import forms
from django.contrib.auth import password_validation

from core.models import User


class RegistrationForm(forms.Form):
    """Self sign-up for writers."""

    name = forms.CharField(max_length=150)
    email = forms.EmailField(max_length=254)
    password = forms.CharField(min_length=8)

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Name is required.')
        return name

    def clean_email(self):
        email = User.objects.normalize_email(self.cleaned_data['email']).lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError('An account with this email already exists.')
        return email

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        if password:
            candidate = User(
                email=cleaned_data.get('email', ''),
                name=cleaned_data.get('name', ''),
            )
            try:
                password_validation.validate_password(password, candidate)
            except forms.ValidationError as exc:
                self.add_error('password', exc)
        return cleaned_data


class PasswordChangeForm(forms.Form):
    """Change password for the logged-in user; requires the current one."""

    current_password = forms.CharField()
    new_password = forms.CharField(min_length=8)

    def __init__(self, user, *args, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_current_password(self):
        current = self.cleaned_data['current_password']
        if not self.user.check_password(current):
            raise forms.ValidationError('Current password is incorrect.')
        return current

    def clean_new_password(self):
        new_password = self.cleaned_data['new_password']
        password_validation.validate_password(new_password, self.user)
        return new_password


def first_error(form):
    """Flatten a bound form's errors into one message for the JSON body."""
    for field, errors in form.errors.items():
        if errors:
            prefix = '' if field == '__all__' else f'{field}: '
            return f'{prefix}{errors[0]}'
    return 'Invalid data'
