"""Domain packages - one per business area, each split into router, service, repository and schemas"""
