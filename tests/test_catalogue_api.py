"""Users, teachers, courses and classes: CRUD, conflicts and ownership."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import PASSWORD
from classroll.ids import new_id


class TestUsers:
    def test_duplicate_email(self, client, factory):
        factory.user()
        resp = client.post(
            "/users", json={"name": "Grace Again", "email": "grace@school.edu", "password": PASSWORD}
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "User with this email already exists"

    def test_public_signup_cannot_claim_admin(self, client, factory):
        teacher = factory.teacher()
        resp = client.post(
            "/users",
            json={"name": "Eve", "email": "eve@school.edu", "password": PASSWORD, "role": "admin"},
        )
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden", "message": "Only admins can create admin accounts"}

        # no account was created, so there is nothing to log in with
        resp = client.post("/auth/user", json={"email": "eve@school.edu", "password": PASSWORD})
        assert resp.status_code == 401
        assert client.get(f"/teachers/{teacher['id']}").status_code == 200

    def test_student_cannot_create_admin(self, client, factory):
        student = factory.user()
        resp = client.post(
            "/users",
            json={"name": "Eve", "email": "eve@school.edu", "password": PASSWORD, "role": "admin"},
            headers=student["headers"],
        )
        assert resp.status_code == 403

    def test_admin_can_create_admin(self, client, admin_headers):
        resp = client.post(
            "/users",
            json={"name": "Root Two", "email": "root2@school.edu", "password": PASSWORD, "role": "admin"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["user"]["role"] == "admin"

    def test_password_is_not_returned(self, client, factory):
        user = factory.user()
        resp = client.get(f"/users/{user['id']}", headers=user["headers"])
        assert resp.status_code == 200
        assert "password" not in resp.json()["user"]

    def test_detail_lists_active_enrollments(self, client, factory):
        teacher = factory.teacher()
        cls = factory.class_(teacher, factory.course(teacher))
        user = factory.user()
        factory.enrollment(user, cls["id"])

        resp = client.get(f"/users/{user['id']}", headers=user["headers"])
        enrollments = resp.json()["user"]["enrollments"]
        assert len(enrollments) == 1
        assert enrollments[0]["class"]["course"]["teacher"]["name"] == teacher["name"]

    def test_search_and_pagination(self, client, factory):
        user = factory.user()
        for i in range(3):
            factory.user(name=f"Alan {i}", email=f"alan{i}@school.edu")
        resp = client.get("/users", params={"search": "alan", "limit": 2}, headers=user["headers"])
        assert resp.json()["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert len(resp.json()["users"]) == 2

    def test_only_admin_changes_role(self, client, factory, admin_headers):
        user = factory.user()
        resp = client.put(f"/users/{user['id']}", json={"role": "admin"}, headers=user["headers"])
        assert resp.status_code == 403

        resp = client.put(f"/users/{user['id']}", json={"role": "admin"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "admin"

    def test_update_password_allows_login(self, client, factory):
        user = factory.user()
        client.put(f"/users/{user['id']}", json={"password": "brand-new-pw"}, headers=user["headers"])
        resp = client.post("/auth/user", json={"email": user["email"], "password": "brand-new-pw"})
        assert resp.status_code == 200

    def test_unknown_user(self, client, factory):
        user = factory.user()
        missing = new_id()
        resp = client.get(f"/users/{missing}", headers=user["headers"])
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found", "details": f"No user found with ID: {missing}"}


class TestTeachers:
    def test_listing_includes_counts(self, client, factory):
        teacher = factory.teacher()
        factory.class_(teacher, factory.course(teacher))
        resp = client.get("/teachers")
        assert resp.status_code == 200
        summary = resp.json()["teachers"][0]
        assert summary["courseCount"] == 1
        assert summary["classCount"] == 1

    def test_duplicate_email(self, client, factory):
        factory.teacher()
        resp = client.post("/teachers", json={"name": "Ada", "email": "ada@school.edu", "password": PASSWORD})
        assert resp.status_code == 409

    def test_update_self(self, client, factory):
        teacher = factory.teacher()
        resp = client.put(f"/teachers/{teacher['id']}", json={"name": "Ada King"}, headers=teacher["headers"])
        assert resp.status_code == 200
        assert resp.json()["teacher"]["name"] == "Ada King"


class TestCourses:
    def test_students_cannot_create(self, client, factory):
        user = factory.user()
        resp = client.post(
            "/courses",
            json={"title": "Hacking", "description": "", "department": "CS", "workload": "1h"},
            headers=user["headers"],
        )
        assert resp.status_code == 403

    def test_duplicate_title_per_teacher(self, client, factory):
        teacher = factory.teacher()
        factory.course(teacher)
        resp = client.post(
            "/courses",
            json={"title": "Algorithms", "description": "again", "department": "CS", "workload": "60h"},
            headers=teacher["headers"],
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Course with this title already exists"

        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        assert factory.course(other)

    def test_update_owner_only(self, client, factory):
        teacher = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        course_id = factory.course(teacher)

        resp = client.put(f"/courses/{course_id}", json={"workload": "80h"}, headers=other["headers"])
        assert resp.status_code == 403

        resp = client.put(f"/courses/{course_id}", json={"workload": "80h"}, headers=teacher["headers"])
        assert resp.status_code == 200
        assert resp.json()["updatedFields"] == ["workload"]
        assert client.get(f"/courses/{course_id}").json()["course"]["workload"] == "80h"

    def test_list_with_class_count(self, client, factory):
        teacher = factory.teacher()
        course_id = factory.course(teacher)
        factory.course(teacher, title="Databases")
        factory.class_(teacher, course_id)

        resp = client.get("/courses", params={"search": "algo"})
        courses = resp.json()["courses"]
        assert [c["title"] for c in courses] == ["Algorithms"]
        assert courses[0]["classCount"] == 1


class TestClasses:
    def test_teacher_cannot_create_for_someone_else(self, client, factory):
        teacher = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        course_id = factory.course(teacher)
        resp = client.post(
            "/classes",
            json={
                "courseId": course_id,
                "teacherId": other["id"],
                "name": "Turma Z",
                "semester": "2025.2",
                "schedule": "Fri 8h",
            },
            headers=teacher["headers"],
        )
        assert resp.status_code == 403

    def test_duplicate_name_in_semester(self, client, factory):
        teacher = factory.teacher()
        course_id = factory.course(teacher)
        factory.class_(teacher, course_id)
        resp = client.post(
            "/classes",
            json={
                "courseId": course_id,
                "teacherId": teacher["id"],
                "name": "Turma A",
                "semester": "2025.1",
                "schedule": "Tue 10h",
            },
            headers=teacher["headers"],
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Class already exists"
        assert factory.class_(teacher, course_id, semester="2025.2")

    def test_unknown_course(self, client, factory):
        teacher = factory.teacher()
        missing = new_id()
        resp = client.post(
            "/classes",
            json={
                "courseId": missing,
                "teacherId": teacher["id"],
                "name": "Turma A",
                "semester": "2025.1",
                "schedule": "Tue 10h",
            },
            headers=teacher["headers"],
        )
        assert resp.status_code == 404
        assert resp.json()["details"] == f"No course found with ID: {missing}"

    def test_detail_counts_active_enrollments(self, client, factory):
        teacher = factory.teacher()
        cls = factory.class_(teacher, factory.course(teacher))
        factory.enrollment(factory.user(), cls["id"])

        body = client.get(f"/classes/{cls['id']}").json()["class"]
        assert body["activeEnrollments"] == 1
        assert body["courseTitle"] == "Algorithms"
        assert body["teacherName"] == teacher["name"]

    def test_update_into_conflict(self, client, factory):
        teacher = factory.teacher()
        course_id = factory.course(teacher)
        factory.class_(teacher, course_id)
        second = factory.class_(teacher, course_id, name="Turma B")

        resp = client.put(f"/classes/{second['id']}", json={"name": "Turma A"}, headers=teacher["headers"])
        assert resp.status_code == 409
        assert resp.json()["error"] == "Class conflict"

    def test_cannot_create_under_someone_elses_course(self, client, factory):
        owner = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        course_id = factory.course(owner)
        resp = client.post(
            "/classes",
            json={
                "courseId": course_id,
                "teacherId": other["id"],
                "name": "Turma X",
                "semester": "2025.1",
                "schedule": "Thu 14h",
            },
            headers=other["headers"],
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == "You can only create classes for your own courses"

    def test_admin_may_create_under_any_course(self, client, factory, admin_headers):
        owner = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        course_id = factory.course(owner)
        resp = client.post(
            "/classes",
            json={
                "courseId": course_id,
                "teacherId": other["id"],
                "name": "Turma X",
                "semester": "2025.1",
                "schedule": "Thu 14h",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201

    def test_teacher_cannot_hand_class_to_someone_else(self, client, factory, admin_headers):
        teacher = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        cls = factory.class_(teacher, factory.course(teacher))

        resp = client.put(f"/classes/{cls['id']}", json={"teacherId": other["id"]}, headers=teacher["headers"])
        assert resp.status_code == 403
        assert client.get(f"/classes/{cls['id']}").json()["class"]["teacherId"] == teacher["id"]

        resp = client.put(f"/classes/{cls['id']}", json={"teacherId": other["id"]}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["class"]["teacherId"] == other["id"]

    def test_teacher_cannot_move_class_to_foreign_course(self, client, factory):
        teacher = factory.teacher()
        other = factory.teacher(name="Barbara Liskov", email="barbara@school.edu")
        cls = factory.class_(teacher, factory.course(teacher))
        foreign_course = factory.course(other, title="Compilers")

        resp = client.put(f"/classes/{cls['id']}", json={"courseId": foreign_course}, headers=teacher["headers"])
        assert resp.status_code == 403
