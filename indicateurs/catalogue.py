"""
Référentiel national qualité : les 32 indicateurs créés pour chaque organisme
"""

INFORMATION = "Conditions d'information du public"
OBJECTIFS = "Objectifs et adaptation des prestations"
ADAPTATION = "Adaptation aux publics bénéficiaires"
MOYENS = "Moyens pédagogiques et techniques"
PERSONNELS = "Qualification des personnels"
ENVIRONNEMENT = "Inscription dans l'environnement"
APPRECIATIONS = "Appréciations et réclamations"
FORMATION_PRO = "Spécifiques formation professionnelle"

# (numéro, titre, description, critère)
INDICATEURS = [
    (1, "Indicateur 1 - Information au public sur les prestations",
     "Les prestations proposées, les délais d'accès, les tarifs et les résultats obtenus sont communiqués au public",
     INFORMATION),
    (2, "Indicateur 2 - Indicateurs de résultats",
     "Les indicateurs de résultats sont publiés et accessibles au public",
     INFORMATION),
    (3, "Indicateur 3 - Analyse des besoins",
     "Une analyse préalable des besoins du bénéficiaire et de l'entreprise est réalisée",
     OBJECTIFS),
    (4, "Indicateur 4 - Objectifs opérationnels",
     "Les objectifs opérationnels et évaluables de la prestation sont définis",
     OBJECTIFS),
    (5, "Indicateur 5 - Contenus et modalités",
     "Les contenus et les modalités de mise en œuvre sont adaptés aux objectifs et aux publics",
     OBJECTIFS),
    (6, "Indicateur 6 - Procédures de positionnement",
     "Des procédures de positionnement et d'évaluation des acquis sont mises en œuvre",
     OBJECTIFS),
    (7, "Indicateur 7 - Adaptation aux publics handicapés",
     "Des adaptations sont prévues pour les publics en situation de handicap",
     ADAPTATION),
    (8, "Indicateur 8 - Adéquation des moyens pédagogiques",
     "Les moyens pédagogiques, techniques et d'encadrement sont adaptés aux prestations",
     MOYENS),
    (9, "Indicateur 9 - Coordination des intervenants",
     "La coordination des différents intervenants est organisée",
     MOYENS),
    (10, "Indicateur 10 - Ressources pédagogiques",
     "Les ressources pédagogiques sont mises à disposition des bénéficiaires",
     MOYENS),
    (11, "Indicateur 11 - Veille pédagogique",
     "Une veille sur les évolutions pédagogiques et technologiques est réalisée",
     MOYENS),
    (12, "Indicateur 12 - Qualification des personnels",
     "Les compétences des personnels sont adaptées aux prestations",
     PERSONNELS),
    (13, "Indicateur 13 - Développement des compétences",
     "Le développement des compétences des personnels est organisé",
     PERSONNELS),
    (14, "Indicateur 14 - Inscription dans l'environnement",
     "Le prestataire s'inscrit dans son environnement professionnel",
     ENVIRONNEMENT),
    (15, "Indicateur 15 - Veille sur l'évolution des métiers",
     "Une veille sur l'évolution des métiers et des compétences est organisée",
     ENVIRONNEMENT),
    (16, "Indicateur 16 - Veille réglementaire",
     "Une veille réglementaire et légale est mise en place",
     ENVIRONNEMENT),
    (17, "Indicateur 17 - Recueil des appréciations",
     "Les appréciations des bénéficiaires sont recueillies",
     APPRECIATIONS),
    (18, "Indicateur 18 - Traitement des appréciations",
     "Les appréciations sont analysées et des actions d'amélioration sont mises en œuvre",
     APPRECIATIONS),
    (19, "Indicateur 19 - Réclamations",
     "Les réclamations sont traitées",
     APPRECIATIONS),
    (20, "Indicateur 20 - Mesure de la satisfaction",
     "La satisfaction des bénéficiaires est mesurée",
     APPRECIATIONS),
    (21, "Indicateur 21 - Conditions d'accueil",
     "Les conditions d'accueil des publics sont garanties",
     FORMATION_PRO),
    (22, "Indicateur 22 - Accompagnement des bénéficiaires",
     "Un accompagnement pédagogique est mis en place",
     FORMATION_PRO),
    (23, "Indicateur 23 - Évaluation des acquis",
     "L'évaluation des acquis est organisée",
     FORMATION_PRO),
    (24, "Indicateur 24 - Insertion professionnelle",
     "L'insertion professionnelle des bénéficiaires est favorisée",
     FORMATION_PRO),
    (25, "Indicateur 25 - Certification",
     "Les modalités de certification sont transparentes",
     FORMATION_PRO),
    (26, "Indicateur 26 - Ressources documentaires",
     "Des ressources documentaires sont mises à disposition",
     FORMATION_PRO),
    (27, "Indicateur 27 - FOAD",
     "Les formations à distance (FOAD) respectent les exigences",
     FORMATION_PRO),
    (28, "Indicateur 28 - Modalités d'évaluation",
     "Les modalités d'évaluation sont adaptées",
     FORMATION_PRO),
    (29, "Indicateur 29 - Suivi des parcours",
     "Le suivi des parcours est assuré",
     FORMATION_PRO),
    (30, "Indicateur 30 - Parcours individualisés",
     "Des parcours individualisés sont proposés",
     FORMATION_PRO),
    (31, "Indicateur 31 - Référents handicap",
     "Un référent handicap est désigné",
     FORMATION_PRO),
    (32, "Indicateur 32 - Conformité réglementaire",
     "La conformité réglementaire est assurée",
     FORMATION_PRO),
]
