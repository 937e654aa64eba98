# src/auth.py
import logging
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src import database
from src.config import Config
from src.erros import ErroAutenticacao
from src.models.usuario import Usuario

logger = logging.getLogger(__name__)

# --- CONFIGURAÇÃO DE SEGURANÇA ---
SECRET_KEY = Config.SECRET_KEY
ALGORITHM = Config.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = Config.ACCESS_TOKEN_EXPIRE_MINUTES

TAMANHO_MINIMO_SENHA = 6

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# --- CÓDIGOS DE ERRO DE AUTENTICAÇÃO ---
CREDENCIAL_INVALIDA = 'auth/invalid-credential'
SENHA_FRACA = 'auth/weak-password'
EMAIL_EM_USO = 'auth/email-already-in-use'

MENSAGENS_ERRO_AUTH = {
    CREDENCIAL_INVALIDA: 'E-mail ou senha incorretos.',
    SENHA_FRACA: 'A senha deve ter pelo menos 6 caracteres.',
    EMAIL_EM_USO: 'Este e-mail já está em uso.',
}
MENSAGEM_ERRO_AUTH_GENERICA = 'Erro ao realizar autenticação. Tente novamente.'


def mensagem_erro_auth(codigo):
    return MENSAGENS_ERRO_AUTH.get(codigo, MENSAGEM_ERRO_AUTH_GENERICA)


def erro_auth(codigo):
    return ErroAutenticacao(codigo, mensagem_erro_auth(codigo))


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _normalizar_email(email):
    return (email or "").strip().lower()

def get_user(db: Session, email: str):
    return db.query(Usuario).filter(Usuario.email == _normalizar_email(email)).first()


# --- ENTRAR / CADASTRAR ---

def autenticar(db: Session, email: str, password: str) -> Usuario:
    """Login com e-mail e senha. Levanta ErroAutenticacao se não conferir."""
    user = get_user(db, email)
    if not user or not password or not verify_password(password, user.hashed_password):
        logger.info("Tentativa de login recusada para %s", email)
        raise erro_auth(CREDENCIAL_INVALIDA)
    logger.info("Usuário %s entrou no sistema", user.email)
    return user


def registrar_usuario(db: Session, email: str, password: str) -> Usuario:
    if not password or len(password) < TAMANHO_MINIMO_SENHA:
        raise erro_auth(SENHA_FRACA)
    if get_user(db, email):
        raise erro_auth(EMAIL_EM_USO)

    user = Usuario(email=_normalizar_email(email), hashed_password=get_password_hash(password))
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise erro_auth(EMAIL_EM_USO)
    db.refresh(user)
    logger.info("Nova conta criada: %s", user.email)
    return user


# --- DEPENDÊNCIAS DE AUTENTICAÇÃO ---

def usuario_do_token(token: str, db: Session):
    """Resolve o usuário de um token JWT; None se o token for inválido."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    email = payload.get("sub")
    if email is None:
        return None
    return get_user(db, email=email)


async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(database.get_db)):
    user = usuario_do_token(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas", headers={"WWW-Authenticate": "Bearer"},
        )
    return user
