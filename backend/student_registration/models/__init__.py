# Importe les modèles pour enregistrer leurs tables dans Base.metadata
# avant l'appel à create_all() par les stores.

from student_registration.models.student import Student  # noqa: F401
