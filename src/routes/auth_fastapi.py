# src/routes/auth_fastapi.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from src import auth, database
from src.erros import ErroAutenticacao
from src.models.usuario import Usuario
from src.schemas import usuario as schemas_usuario

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Authentication"]
)


def _token_para(user):
    access_token = auth.create_access_token(data={"sub": user.email})
    user_info = schemas_usuario.UsuarioRead.model_validate(user)
    return {"access_token": access_token, "token_type": "bearer", "user_info": user_info}


@router.post("/token", response_model=schemas_usuario.Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(database.get_db)):
    # Usamos o e-mail como username
    try:
        user = auth.autenticar(db, form_data.username, form_data.password)
    except ErroAutenticacao as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.mensagem,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_para(user)


@router.post("/registrar", response_model=schemas_usuario.Token, status_code=status.HTTP_201_CREATED)
def registrar(dados: schemas_usuario.UsuarioCreate, db: Session = Depends(database.get_db)):
    try:
        user = auth.registrar_usuario(db, dados.email, dados.password)
    except ErroAutenticacao as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.mensagem)
    return _token_para(user)


@router.get("/me", response_model=schemas_usuario.UsuarioRead)
async def read_users_me(current_user: Usuario = Depends(auth.get_current_user)):
    """
    Retorna os dados do usuário atualmente logado.
    """
    return current_user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(current_user: Usuario = Depends(auth.get_current_user)):
    # Os tokens não guardam estado no servidor; o cliente apenas descarta o seu.
    logger.info("Usuário %s saiu do sistema", current_user.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
