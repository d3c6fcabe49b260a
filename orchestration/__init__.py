"""
ORCHESTRATION LAYER CONTRACT

Координация одного запуска архивации: диапазон дат, предусловия,
обход каталогов, обработка и сдвиг границы.

Зависимости передаются через конструктор, см. archive_service.ArchiveOrchestrator.
"""
