"""Deletes are refused while dependents exist, and succeed once they are gone."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


class TestTeacherDeletion:
    def test_refused_while_owning_courses_and_classes(self, client, factory):
        teacher = factory.teacher()
        course_id = factory.course(teacher)
        cls = factory.class_(teacher, course_id)

        resp = client.delete(f"/teachers/{teacher['id']}", headers=teacher["headers"])
        assert resp.status_code == 409
        assert resp.json() == {
            "error": "Teacher has associated courses or classes",
            "message": "Cannot delete a teacher that has associated courses or classes",
            "courseCount": 1,
            "classCount": 1,
        }

        assert client.delete(f"/classes/{cls['id']}", headers=teacher["headers"]).status_code == 200
        assert client.delete(f"/courses/{course_id}", headers=teacher["headers"]).status_code == 200

        resp = client.delete(f"/teachers/{teacher['id']}", headers=teacher["headers"])
        assert resp.status_code == 200
        assert resp.json()["deletedId"] == teacher["id"]
        assert client.get(f"/teachers/{teacher['id']}").status_code == 404

    def test_other_teacher_is_forbidden(self, client, factory):
        teacher = factory.teacher()
        intruder = factory.teacher(name="Mallory", email="mallory@school.edu")
        resp = client.delete(f"/teachers/{teacher['id']}", headers=intruder["headers"])
        assert resp.status_code == 403
        assert resp.json()["error"] == "Forbidden"

    def test_admin_may_delete(self, client, factory, admin_headers):
        teacher = factory.teacher()
        assert client.delete(f"/teachers/{teacher['id']}", headers=admin_headers).status_code == 200


class TestCourseDeletion:
    def test_refused_while_it_has_classes(self, client, factory):
        teacher = factory.teacher()
        course_id = factory.course(teacher)
        factory.class_(teacher, course_id)

        resp = client.delete(f"/courses/{course_id}", headers=teacher["headers"])
        assert resp.status_code == 409
        assert resp.json()["error"] == "Course has classes"
        assert resp.json()["classCount"] == 1


class TestClassDeletion:
    def test_refused_while_active_enrollments(self, client, factory):
        teacher = factory.teacher()
        cls = factory.class_(teacher, factory.course(teacher))
        user = factory.user()
        enrollment = factory.enrollment(user, cls["id"])

        resp = client.delete(f"/classes/{cls['id']}", headers=teacher["headers"])
        assert resp.status_code == 409
        assert resp.json()["enrollmentCount"] == 1

        client.put(
            f"/enrollments/{enrollment['enrollmentId']}",
            json={"isActive": False},
            headers=user["headers"],
        )
        assert client.delete(f"/classes/{cls['id']}", headers=teacher["headers"]).status_code == 200

        # the inactive enrollment went with the class
        resp = client.get("/enrollments", headers=user["headers"])
        assert resp.json()["pagination"]["total"] == 0


class TestUserDeletion:
    def test_refused_while_active_enrollments(self, client, factory):
        teacher = factory.teacher()
        cls = factory.class_(teacher, factory.course(teacher))
        user = factory.user()
        enrollment = factory.enrollment(user, cls["id"])

        resp = client.delete(f"/users/{user['id']}", headers=user["headers"])
        assert resp.status_code == 409
        assert resp.json() == {
            "error": "User has active enrollments",
            "message": "Cannot delete a user that has active course enrollments",
            "enrollmentCount": 1,
        }

        client.delete(f"/enrollments/{enrollment['enrollmentId']}", headers=user["headers"])
        assert client.delete(f"/users/{user['id']}", headers=user["headers"]).status_code == 200

    def test_other_user_is_forbidden(self, client, factory):
        user = factory.user()
        other = factory.user(name="Other", email="other@school.edu")
        resp = client.delete(f"/users/{user['id']}", headers=other["headers"])
        assert resp.status_code == 403
