"""
Règle de complétion des indicateurs à partir des documents associés

- aucun document : non commencé, 0 %
- au moins une preuve et au moins une procédure ou un modèle : terminé, 100 %
- seulement des preuves : en cours, ``evidence_weight`` %
- seulement des procédures ou modèles : en cours, ``reference_weight`` %

Les poids sont paramétrables par organisme (QualitySettings) et totalisent 100.
"""
from indicateurs.models import IndicatorStatus, default_document_counts
from parametre.models import QualitySettings


class CompletionPolicy:

    def __init__(self, evidence_weight=50, reference_weight=50):
        if not (1 <= evidence_weight <= 99 and 1 <= reference_weight <= 99):
            raise ValueError("Les poids de complétion doivent être compris entre 1 et 99")
        if evidence_weight + reference_weight != 100:
            raise ValueError("La somme des poids de complétion doit être égale à 100")
        self.evidence_weight = evidence_weight
        self.reference_weight = reference_weight

    @classmethod
    def for_organization(cls, organization_id):
        settings = QualitySettings.get_for_organization(organization_id)
        return cls(settings.evidence_weight, settings.reference_weight)

    def evaluate(self, counts):
        """
        Retourne (statut, taux) pour des compteurs {procedure, model, evidence}
        """
        counts = {**default_document_counts(), **(counts or {})}
        has_evidence = counts['evidence'] > 0
        has_reference = counts['procedure'] + counts['model'] > 0

        if has_evidence and has_reference:
            return IndicatorStatus.COMPLETED, 100
        if has_evidence:
            return IndicatorStatus.IN_PROGRESS, self.evidence_weight
        if has_reference:
            return IndicatorStatus.IN_PROGRESS, self.reference_weight
        return IndicatorStatus.NOT_STARTED, 0
