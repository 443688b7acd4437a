from .document import Document, DocumentCategory, DocumentPermission, DocumentTag, DocumentTagRelation
from .property import Property, Unit
from .tenant import Tenant
from .worker import Skill, Worker, WorkerSkill
