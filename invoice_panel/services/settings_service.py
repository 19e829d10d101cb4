"""Panel settings stored in the local database."""
from typing import Dict, List, Optional

from flask import current_app
from sqlalchemy.orm import Session

from invoice_panel.exceptions import BusinessLogicError
from invoice_panel.models import AppSetting

SETTING_KEYS = ('default_tax_rate', 'invoice_prefix', 'footer_text')


def _defaults() -> Dict[str, str]:
    return {
        'default_tax_rate': str(current_app.config.get('DEFAULT_TAX_RATE', '20')),
        'invoice_prefix': current_app.config.get('INVOICE_PREFIX', 'FAC'),
        'footer_text': '',
    }


def get_settings(session: Session) -> Dict[str, str]:
    """All panel settings, falling back to config defaults for keys never saved."""
    settings = _defaults()
    for row in session.query(AppSetting).filter(AppSetting.key.in_(SETTING_KEYS)).all():
        settings[row.key] = row.value
    return settings


def get_setting(session: Session, key: str) -> Optional[str]:
    return get_settings(session).get(key)


def validate_settings(data: Dict[str, str]) -> List[str]:
    """Validate settings form values and return list of errors."""
    errors = []
    raw_rate = (data.get('default_tax_rate') or '').strip().replace(',', '.')
    try:
        rate = float(raw_rate)
    except ValueError:
        errors.append('Le taux de TVA doit être un nombre.')
    else:
        if not 0 <= rate <= 100:
            errors.append('Le taux de TVA doit être compris entre 0 et 100.')

    prefix = (data.get('invoice_prefix') or '').strip()
    if not prefix:
        errors.append('Le préfixe des factures est obligatoire.')
    elif len(prefix) > 10:
        errors.append('Le préfixe des factures doit contenir au plus 10 caractères.')
    return errors


def save_settings(session: Session, data: Dict[str, str]) -> Dict[str, str]:
    """
    Validate and persist settings.

    Raises:
        BusinessLogicError: If any value is invalid (nothing is saved)
    """
    errors = validate_settings(data)
    if errors:
        raise BusinessLogicError(' '.join(errors))

    for key in SETTING_KEYS:
        value = (data.get(key) or '').strip()
        row = session.query(AppSetting).filter_by(key=key).first()
        if row:
            row.value = value
        else:
            session.add(AppSetting(key=key, value=value))

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise

    current_app.logger.info(f"[SETTINGS] Saved panel settings: {', '.join(SETTING_KEYS)}")
    return get_settings(session)
