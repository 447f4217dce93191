# Pipeline stages module
from .stage1_ingest import RecordIngestionStage, ContactScorePolicy
from .stage2_merge import DatasetMergeStage
from .stage3_scoring import SalesFitScoringStage
from .stage5_assistant import CompanyAssistantStage
