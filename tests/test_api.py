import pytest
from fastapi.testclient import TestClient

from pallavi.api.dependencies.services import get_actions, get_model_manager, get_orchestrator, get_profile_store
from pallavi.api.main import create_app
from pallavi.flows.definitions import FLOWS
from pallavi.models.prompts import PromptManager
from pallavi.models.providers.base import ModelError
from pallavi.profile import ProfileStore, UserProfile
from pallavi.utils.data_uri import MAX_ATTACHMENT_BYTES, parse_data_uri


@pytest.fixture
def store():
    return ProfileStore()


@pytest.fixture
def client(scripted_manager, actions, orchestrator, store, sample_replies):
    """
    App with every service dependency overridden. The lifespan is not
    entered, so no real ModelManager or provider is built.
    """
    scripted_manager.replies.update(sample_replies)
    scripted_manager.config = {"tasks": {name: {} for name in FLOWS}}
    scripted_manager.get_stats.return_value = {}
    scripted_manager.prompts = PromptManager()

    app = create_app()
    app.dependency_overrides[get_model_manager] = lambda: scripted_manager
    app.dependency_overrides[get_actions] = lambda: actions
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_profile_store] = lambda: store
    return TestClient(app)


class TestRootAndHealth:
    def test_root(self, client):
        body = client.get("/").json()

        assert body["status"] == "operational"
        assert body["endpoints"]["flows"] == "/api/v1/flows"

    def test_health(self, client, scripted_manager):
        scripted_manager.get_stats.return_value = {
            "assess_skills": {"total_calls": 3, "successful_calls": 2, "total_latency_ms": 100}
        }

        response = client.get("/health/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["dependencies"]["profile_store"] == "complete"
        assert body["dependencies"]["model_tasks"] == "9 configured"
        assert body["dependencies"]["task:assess_skills"] == "2/3 calls succeeded"
        assert body["dependencies"]["prompts"] == "9 templates"

    def test_health_flags_missing_prompt(self, client, scripted_manager):
        scripted_manager.config["tasks"]["evaluate_answer"] = {"prompt_ref": "interview/evaluate@v9"}
        scripted_manager.config["tasks"]["assess_skills"] = {"prompt_ref": "assessment/skills@v1"}

        dependencies = client.get("/health/").json()["dependencies"]

        assert dependencies["prompt:evaluate_answer"] == "missing interview/evaluate@v9"
        assert "prompt:assess_skills" not in dependencies

    def test_ready(self, client, scripted_manager):
        scripted_manager.health_check.return_value = {"gemini": True}

        assert client.get("/health/ready").json()["ready"] is True

    def test_not_ready(self, client, scripted_manager):
        scripted_manager.health_check.return_value = {"gemini": False}

        body = client.get("/health/ready").json()

        assert body["ready"] is False
        assert "gemini" in body["reason"]


class TestFlowEndpoints:
    def test_list_flows(self, client):
        flows = client.get("/api/v1/flows/").json()

        by_name = {f["name"]: f for f in flows}
        assert set(by_name) == set(FLOWS)
        assert by_name["assess_skills"]["accepts_attachment"] is True
        assert "questionCount" in by_name["generate_interview_questions"]["input_schema"]["properties"]

    def test_run_flow_success(self, client):
        """
        Test: Running a flow by name over HTTP
        How: POST the camelCase input for mock interview questions
        Ensures: The ActionResult comes back with camelCase output keys
        """
        response = client.post("/api/v1/flows/generate_interview_questions", json={"careerPath": "Data Analyst"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]["questions"]) == 3
        assert body["error"] is None

    def test_run_flow_camel_case_output(self, client):
        body = client.post("/api/v1/flows/recommend_career_paths",
                           json={"skills": "Python, SQL", "interests": "Data, AI"}).json()

        assert body["data"]["careerPaths"][0]["path"] == "Data Analyst"

    def test_invalid_input_is_a_failed_result(self, client, scripted_manager):
        response = client.post("/api/v1/flows/recommend_career_paths", json={"skills": "", "interests": "Data, AI"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "validation_error"
        assert body["data"] is None
        scripted_manager.call.assert_not_called()

    def test_model_failure_is_a_failed_result(self, client, scripted_manager):
        scripted_manager.replies["evaluate_answer"] = ModelError("upstream 500")

        body = client.post("/api/v1/flows/evaluate_answer", json={"question": "Why?", "answer": "Because."}).json()

        assert body["success"] is False
        assert "upstream 500" in body["error"]

    def test_unknown_flow_is_404(self, client):
        response = client.post("/api/v1/flows/write_poem", json={})

        assert response.status_code == 404
        assert response.json()["error"] == "Unknown flow: write_poem"
        assert response.json()["error_code"] == "not_found"


class TestAssessmentUpload:
    def test_without_transcript(self, client, scripted_manager):
        response = client.post("/api/v1/assessment/", data={
            "questionnaire_answers": "I enjoy building data pipelines in Python.",
        })

        assert response.status_code == 200
        assert response.json()["data"]["skillScores"][0]["skill"] == "Python"
        assert scripted_manager.call.call_args.kwargs["attachments"] is None

    def test_with_transcript(self, client, scripted_manager):
        response = client.post(
            "/api/v1/assessment/",
            data={"questionnaire_answers": "I enjoy building data pipelines in Python."},
            files={"transcript": ("transcript.txt", b"Grade: A", "text/plain")},
        )

        assert response.json()["success"] is True
        attachments = scripted_manager.call.call_args.kwargs["attachments"]
        assert attachments[0].mime_type == "text/plain"
        assert attachments[0].to_bytes() == b"Grade: A"
        transcript_uri = scripted_manager.call.call_args.kwargs["variables"]["transcript_data_uri"]
        assert parse_data_uri(transcript_uri).to_bytes() == b"Grade: A"

    def test_oversized_transcript(self, client, scripted_manager):
        response = client.post(
            "/api/v1/assessment/",
            data={"questionnaire_answers": "I enjoy building data pipelines in Python."},
            files={"transcript": ("transcript.pdf", b"x" * (MAX_ATTACHMENT_BYTES + 1), "application/pdf")},
        )

        assert response.status_code == 413
        assert response.json()["error"] == "Please upload a transcript smaller than 4MB."
        scripted_manager.call.assert_not_called()

    def test_short_answers(self, client, scripted_manager):
        body = client.post("/api/v1/assessment/", data={"questionnaire_answers": "Too short"}).json()

        assert body["success"] is False
        scripted_manager.call.assert_not_called()


class TestProfileEndpoints:
    def test_get_default_profile(self, client):
        body = client.get("/api/v1/profile/").json()

        assert body["profile"]["name"] == "Alex Doe"
        assert body["profile"]["careerPreferences"] == "Software Engineer, Full-Stack Developer"
        assert body["isComplete"] is True

    def test_replace_profile(self, client, store):
        response = client.put("/api/v1/profile/", json={
            "name": "Priya",
            "skills": "Python, SQL",
            "interests": "Data, AI",
        })

        assert response.status_code == 200
        assert store.get().name == "Priya"
        assert store.get().career_preferences is None

    def test_replace_profile_rejects_short_name(self, client, store):
        response = client.put("/api/v1/profile/", json={"name": "P", "skills": "Python, SQL", "interests": "Data, AI"})

        assert response.status_code == 422
        assert store.get().name == "Alex Doe"


class TestCareerEndpoints:
    def test_dashboard(self, client, scripted_manager):
        body = client.get("/api/v1/careers/dashboard").json()

        assert body["errors"] == []
        assert body["assessment"]["summary"]
        assert len(body["recommendations"]["careerPaths"]) == 3
        assert body["stale"] is False

    def test_dashboard_incomplete_profile(self, client, store, scripted_manager):
        store.replace(UserProfile(name="Priya"))

        body = client.get("/api/v1/careers/dashboard").json()

        assert body["errors"] == ["Please complete your profile to unlock your personalized career dashboard."]
        scripted_manager.call.assert_not_called()

    def test_recommendations_incomplete_profile(self, client, store, scripted_manager):
        store.replace(UserProfile())

        body = client.get("/api/v1/careers/recommendations").json()

        assert body["success"] is False
        assert body["error"] == "Please complete your profile to get recommendations."
        scripted_manager.call.assert_not_called()

    def test_recommendations(self, client, scripted_manager, store):
        body = client.get("/api/v1/careers/recommendations").json()

        assert body["success"] is True
        assert scripted_manager.call.call_args.kwargs["variables"]["skills"] == store.get().skills

    def test_details(self, client, scripted_manager):
        body = client.post("/api/v1/careers/details", json={"careerPath": "Data Analyst"}).json()

        assert body["careerPath"] == "Data Analyst"
        assert body["skillsGap"]["suggestedSkillsToLearn"] == "Statistics, Tableau, Pandas"
        assert body["learningResources"]["resources"]
        assert body["errors"] == []

    def test_details_gap_failure(self, client, scripted_manager):
        scripted_manager.replies["analyze_skills_gap"] = ModelError("down")

        body = client.post("/api/v1/careers/details", json={"careerPath": "Data Analyst"}).json()

        assert body["skillsGap"] is None
        assert body["learningResources"] is None
        assert body["errors"][0].startswith("Could not analyze skills gap")

    def test_curriculum(self, client, scripted_manager):
        body = client.post("/api/v1/careers/curriculum", json={"targetCareerPaths": "Data Scientist"}).json()

        assert body["success"] is True
        assert body["data"]["recommendedCurriculum"]

    def test_curriculum_short_target(self, client):
        response = client.post("/api/v1/careers/curriculum", json={"targetCareerPaths": "ML"})

        assert response.status_code == 422
