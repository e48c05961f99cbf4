from __future__ import annotations

from jusmind import catalog


def test_archive_rules():
    exams = catalog.build_exam_archive()

    by_inst = {}
    for exam in exams[:-2]:
        by_inst.setdefault(exam.institution, []).append(exam.subject)

    assert len(by_inst["OAB"]) == len(catalog.SUBJECTS)
    assert sorted(by_inst["PGE-RJ"]) == sorted(
        [
            "Direito Constitucional",
            "Direito Administrativo",
            "Processo Civil",
            "Direito Tributário",
            "Fazenda Pública em Juízo",
        ]
    )
    assert sorted(by_inst["ALERJ"]) == sorted(
        [
            "Direito Constitucional",
            "Direito Administrativo",
            "Regimento Interno (Casas Legislativas)",
        ]
    )
    assert len(by_inst["TJRJ"]) == 6
    assert len(by_inst["UFF"]) == len(by_inst["UFRJ"]) == 4
    assert [exam.id for exam in exams[-2:]] == ["disc-pge-1", "disc-tj-1"]
    assert len(exams) == 51
    assert len({exam.id for exam in exams}) == len(exams)


def test_exam_fields_for_first_subject():
    exams = catalog.exams_for_subject("Direito Constitucional")

    assert [exam.institution for exam in exams] == [
        "OAB",
        "TJRJ",
        "ALERJ",
        "PGE-RJ",
        "Estácio",
    ]
    oab = exams[0]
    assert oab.id == "oab-0"
    assert oab.year == 2023
    assert oab.period == "XXX2 Exame"
    assert oab.context_tag == "OAB"
    assert exams[3].period == "Residência Jurídica"
    assert exams[4].period == "1º Semestre"


def test_search_ignores_case_and_accents():
    assert catalog.search_subjects("TRIBUTARIO") == ["Direito Tributário"]
    assert catalog.search_subjects("etica") == ["Ética Profissional"]
    assert catalog.search_subjects("processo") == [
        "Processo Civil",
        "Processo do Trabalho",
        "Processo Penal",
    ]
    assert len(catalog.search_subjects("")) == len(catalog.SUBJECTS)
    assert catalog.search_subjects("astronomia") == []


def test_main_lists_subjects(capsys):
    assert catalog.main([]) == 0
    out = capsys.readouterr().out
    assert "Disciplinas" in out
    assert "Mostrando 23 disciplinas" in out


def test_main_search_without_matches(capsys):
    assert catalog.main(["--search", "astronomia"]) == 1
    assert "No subjects match" in capsys.readouterr().out


def test_main_subject_table_and_unknown_subject(capsys):
    assert catalog.main(["--subject", "Direito Penal"]) == 0
    out = capsys.readouterr().out
    assert "OAB" in out
    assert "TJRJ" in out

    assert catalog.main(["--subject", "Penal"]) == 2
    out = capsys.readouterr().out
    assert "Unknown subject 'Penal'." in out
    assert "Direito Penal" in out
