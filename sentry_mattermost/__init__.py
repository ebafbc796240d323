"""Pacote do bridge Sentry -> Mattermost.

Este pacote contém:
- constants: variáveis de ambiente e constantes do protocolo
- config: carga da configuração (env / .env) em um objeto imutável
- logging_config: configuração de logs estruturados
- errors: hierarquia de erros do pipeline
- signature: verificação HMAC do webhook do Sentry
- body: extração da ação a partir do JSON recebido
- mattermost: cliente HTTP da API do Mattermost
- controller: criação do Flask app e endpoints
"""
