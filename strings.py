"""
Centralized text labels for the Guia TNN city guide (Portuguese UI).
"""
from __future__ import annotations

NAV = {
    'brand': 'Guia TNN',
    'home': 'Início',
    'photos': 'Fotos',
    'businesses': 'Comércios',
    'events': 'Eventos',
    'dashboard': 'Painel',
    'admins': 'Administradores',
    'add_admin': 'Adicionar administrador',
    'add_photo': 'Adicionar foto',
    'attempts': 'Tentativas de criação',
    'login': 'Entrar',
    'logout': 'Sair',
}

QUICK_NAV = {
    'comercios': {'title': 'Comércios', 'description': 'Encontre lojas e serviços da cidade.'},
    'eventos': {'title': 'Eventos', 'description': 'Agenda cultural e festividades.'},
    'fotos': {'title': 'Fotos', 'description': 'Galeria com as paisagens da cidade.'},
}

FLASH = {
    'login_invalid': 'Email ou senha inválidos. Por favor, tente novamente.',
    'login_welcome': 'Bem-vindo, {name}.',
    'logged_out': 'Você saiu da sua conta.',
    'admin_created': 'Administrador "{name}" criado com sucesso.',
    'admin_created_suspicious': 'Administrador "{name}" criado, mas a requisição foi marcada como suspeita.',
    'admin_deleted': 'Administrador removido com sucesso.',
    'admin_not_found': 'Administrador não encontrado.',
    'admin_self_delete': 'Você não pode remover sua própria conta.',
    'photo_uploaded': 'Foto "{title}" enviada com sucesso.',
    'photo_deleted': 'Foto removida com sucesso.',
    'photo_published': 'Foto "{title}" publicada.',
    'photo_unpublished': 'Foto "{title}" ocultada da galeria.',
    'photo_not_found': 'Foto não encontrada.',
    'internal_error': 'Ocorreu um erro inesperado. Tente novamente.',
}

# Workflow error messages shown in the dashboard forms.
ERRORS = {
    'Unauthorized': 'Chave de administrador inválida.',
    'User already exists': 'Já existe um usuário com este email.',
    'Admin creation not allowed from this client': 'Criação de administrador bloqueada para este cliente.',
    'Title is required': 'O título é obrigatório.',
    'No file provided': 'Selecione um arquivo de imagem.',
    'Failed to upload image to storage': 'Falha ao enviar a imagem para o armazenamento.',
}


def error_message(message: str) -> str:
    """Portuguese text for a service error message, falling back to the original."""
    if message.startswith('Missing required fields'):
        return 'Preencha nome, email, senha e chave de administrador.'
    return ERRORS.get(message, message)
