"""
Forms for authentication, catalog management, user administration and settings.
"""
from flask_wtf import FlaskForm
from wtforms import DecimalField, PasswordField, SelectField, StringField, TextAreaField
from invoice_panel.models import ROLE_ADMIN, ROLE_USER
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, Regexp

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class LoginForm(FlaskForm):
    email = StringField(
        'Adresse email',
        validators=[DataRequired(message="L'email est requis"), Regexp(EMAIL_PATTERN, message='Email invalide')]
    )
    password = PasswordField(
        'Mot de passe',
        validators=[DataRequired(message='Le mot de passe est requis')]
    )


class ClientForm(FlaskForm):
    """Create/edit a client."""

    name = StringField(
        'Nom',
        validators=[DataRequired(message='Le nom du client est obligatoire'), Length(max=200)]
    )
    email = StringField(
        'Email',
        validators=[DataRequired(message="L'email est obligatoire"), Regexp(EMAIL_PATTERN, message='Email invalide')]
    )
    phone = StringField('Téléphone', validators=[Optional(), Length(max=40)])
    address = TextAreaField('Adresse', validators=[Optional()], render_kw={'rows': 2})

    def to_payload(self) -> dict:
        return {
            'name': self.name.data.strip(),
            'email': self.email.data.strip(),
            'phone': (self.phone.data or '').strip(),
            'address': (self.address.data or '').strip(),
        }


class ProductForm(FlaskForm):
    """Create/edit a product or service."""

    name = StringField(
        'Nom du produit / service',
        validators=[DataRequired(message='Le nom est obligatoire'), Length(max=200)]
    )
    description = TextAreaField('Description', validators=[Optional()], render_kw={'rows': 3})
    price = DecimalField(
        'Prix unitaire',
        validators=[
            InputRequired(message='Veuillez entrer un prix numérique valide.'),
            NumberRange(min=0, message='Le prix ne peut pas être négatif')
        ],
        places=2,
        render_kw={'placeholder': '0.00', 'step': '0.01', 'min': '0'}
    )

    def to_payload(self) -> dict:
        return {
            'name': self.name.data.strip(),
            'description': (self.description.data or '').strip(),
            'price': float(self.price.data),
        }


class UserForm(FlaskForm):
    """Create/edit a panel account (admin only). Password is optional when editing."""

    name = StringField(
        'Nom complet',
        validators=[DataRequired(message='Le nom est requis'), Length(max=120)]
    )
    email = StringField(
        'Adresse email',
        validators=[DataRequired(message="L'email est requis"), Regexp(EMAIL_PATTERN, message='Email invalide')]
    )
    password = PasswordField(
        'Mot de passe',
        validators=[Optional(), Length(min=6, message='Le mot de passe doit contenir au moins 6 caractères')]
    )
    role = SelectField(
        'Rôle',
        choices=[(ROLE_USER, 'Utilisateur'), (ROLE_ADMIN, 'Administrateur')],
        default=ROLE_USER
    )

    def to_payload(self) -> dict:
        payload = {
            'name': self.name.data.strip(),
            'email': self.email.data.strip(),
            'role': self.role.data,
        }
        if self.password.data:
            payload['password'] = self.password.data
        return payload


class SettingsForm(FlaskForm):
    default_tax_rate = StringField(
        'Taux de TVA par défaut (%)',
        validators=[DataRequired(message='Le taux de TVA est requis')],
        render_kw={'type': 'number', 'min': '0', 'max': '100', 'step': '0.01'}
    )
    invoice_prefix = StringField(
        'Préfixe des factures',
        validators=[DataRequired(message='Le préfixe est requis'), Length(max=10)],
        render_kw={'placeholder': 'FAC'}
    )
    footer_text = TextAreaField(
        'Pied de page des factures',
        validators=[Optional()],
        render_kw={'rows': 4, 'placeholder': 'Mentions légales, coordonnées bancaires, etc.'}
    )
