from html import escape

from shared.core.config import settings


def _layout(content: str) -> str:
    return f"""
    <html>
    <body style="font-family: Arial; background:#f5f7fb; padding:20px;">
        <div style="max-width:600px;background:white;padding:30px;border-radius:10px;">
            {content}
            <hr/>
            <p style="color:gray;font-size:12px;">
            Ceci est un message automatique de {escape(settings.OWNER_NAME or settings.APP_NAME)}
            </p>
        </div>
    </body>
    </html>
    """


def get_welcome_email_template(first_name: str, email: str, temporary_password: str) -> str:
    return _layout(f"""
            <h2 style="color:#2b2f36;">Bienvenue {escape(first_name)} !</h2>
            <p>Un compte a été créé pour vous.</p>
            <p>Identifiant : <strong>{escape(email)}</strong></p>
            <p>Mot de passe temporaire : <strong>{escape(temporary_password)}</strong></p>
            <p>Merci de le modifier dès votre première connexion.</p>
    """)


def get_signing_email_template(signer_name: str, contract_number: str, signing_url: str, expire_days: int) -> str:
    return _layout(f"""
            <h2 style="color:#2b2f36;">Votre contrat est prêt</h2>
            <p>Bonjour <strong>{escape(signer_name)}</strong>,</p>
            <p>Le contrat <strong>{escape(contract_number)}</strong> est disponible pour signature électronique.</p>
            <p><a href="{escape(signing_url)}">Consulter et signer le contrat</a></p>
            <p>Ce lien est valable {expire_days} jours.</p>
    """)


def get_contract_signed_email_template(signer_name: str, contract_number: str) -> str:
    return _layout(f"""
            <h2 style="color:#2b2f36;">Contrat signé</h2>
            <p>Bonjour <strong>{escape(signer_name)}</strong>,</p>
            <p>Votre signature du contrat <strong>{escape(contract_number)}</strong> a bien été enregistrée.</p>
    """)


def get_password_reset_email_template(first_name: str, reset_url: str, expire_minutes: int) -> str:
    return _layout(f"""
            <h2 style="color:#2b2f36;">Réinitialisation de votre mot de passe</h2>
            <p>Bonjour <strong>{escape(first_name or "Utilisateur")}</strong>,</p>
            <p>Une réinitialisation de mot de passe a été demandée pour votre compte.</p>
            <p><a href="{escape(reset_url)}">Choisir un nouveau mot de passe</a></p>
            <p>Ce lien est valable {expire_minutes} minutes. Si vous n'êtes pas à l'origine de cette demande, ignorez ce message.</p>
    """)
