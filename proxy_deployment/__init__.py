from proxy_deployment.config import load_environment

# scripts import this package before click reads option envvars
load_environment()
