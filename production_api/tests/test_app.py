import unittest

from production_api.tests import support
from production_api.tests.support import BUCKET_URL, image


class ProjectApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()
        self.headers = support.admin_headers()

    def _create(self, images=("img1.jpg",), video=None, **fields):
        data = {"title": "Villa A", "location": "Beirut", "year": "2021", "description": "x"}
        data.update(fields)
        files = [("images", image(name)) for name in images]
        if video:
            files.append(("video", (video, b"vid", "video/mp4")))
        return self.client.post("/api/projects", data=data, files=files, headers=self.headers)

    def test_create_project_returns_canonical_urls(self):
        response = self._create()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["images"], [f"{BUCKET_URL}/img1.jpg"])
        self.assertIsNone(body["video"])
        self.assertEqual(body["year"], 2021)
        self.assertIn("img1.jpg", support.storage().objects)

    def test_created_project_reads_back_unchanged(self):
        created = self._create(images=("a.jpg", "b.jpg"), video="clip.mp4").json()
        listed = self.client.get("/api/projects").json()
        self.assertEqual(listed, [created])
        self.assertEqual(self.client.get(f"/api/projects/{created['id']}").json(), created)

    def test_create_without_images_is_rejected_before_upload(self):
        response = self._create(images=())
        self.assertEqual(response.status_code, 400)
        self.assertEqual(support.storage().count("store"), 0)

    def test_create_with_failed_upload_saves_nothing(self):
        support.storage().fail_store_keys.add("bad.jpg")
        response = self._create(images=("ok.jpg", "bad.jpg"))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Failed to upload 'bad.jpg'"})
        self.assertEqual(self.client.get("/api/projects").json(), [])
        self.assertNotIn("ok.jpg", support.storage().objects)

    def test_legacy_paths_still_work(self):
        created = self._create().json()
        self.assertEqual(len(self.client.get("/api/projects/getProjects").json()), 1)
        response = self.client.put(
            f"/api/projects/updateProject/{created['id']}",
            data={"title": "Renamed"},
            headers=self.headers,
        )
        self.assertEqual(response.json()["title"], "Renamed")

    def test_update_reconciles_images(self):
        created = self._create(images=("a.jpg", "b.jpg")).json()

        response = self.client.put(
            f"/api/projects/{created['id']}",
            files=[("images", image("b.jpg")), ("images", image("c.jpg"))],
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["images"], [f"{BUCKET_URL}/b.jpg", f"{BUCKET_URL}/c.jpg"]
        )
        self.assertNotIn("a.jpg", support.storage().objects)

    def test_update_without_images_keeps_them(self):
        created = self._create(images=("a.jpg",), video="clip.mp4").json()
        response = self.client.put(
            f"/api/projects/{created['id']}",
            data={"description": "new text"},
            headers=self.headers,
        )
        body = response.json()
        self.assertEqual(body["description"], "new text")
        self.assertEqual(body["images"], created["images"])
        self.assertEqual(body["video"], created["video"])
        self.assertEqual(support.storage().count("remove"), 0)

    def test_failed_upload_leaves_record_unchanged(self):
        created = self._create(images=("a.jpg", "b.jpg")).json()
        support.storage().fail_store_keys.add("c.jpg")

        response = self.client.put(
            f"/api/projects/{created['id']}",
            data={"title": "Changed"},
            files=[("images", image("b.jpg")), ("images", image("c.jpg"))],
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 500)
        stored = self.client.get(f"/api/projects/{created['id']}").json()
        self.assertEqual(stored["images"], created["images"])
        self.assertEqual(stored["title"], "Villa A")

    def test_failed_video_upload_leaves_no_new_images(self):
        created = self._create(images=("a.jpg",), video="old.mp4").json()
        support.storage().fail_store_keys.add("new.mp4")

        response = self.client.put(
            f"/api/projects/{created['id']}",
            files=[
                ("images", image("c.jpg")),
                ("video", ("new.mp4", b"v", "video/mp4")),
            ],
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 500)
        stored = self.client.get(f"/api/projects/{created['id']}").json()
        self.assertEqual(stored["images"], created["images"])
        self.assertEqual(stored["video"], created["video"])
        self.assertNotIn("c.jpg", support.storage().objects)
        self.assertNotIn("new.mp4", support.storage().objects)

    def test_failed_create_keeps_object_shared_with_another_project(self):
        first = self._create(images=("shared.jpg",)).json()
        support.storage().fail_store_keys.add("bad.jpg")

        response = self._create(images=("shared.jpg", "bad.jpg"))
        self.assertEqual(response.status_code, 500)
        self.assertIn("shared.jpg", support.storage().objects)
        self.assertEqual(
            self.client.get(f"/api/projects/{first['id']}").json()["images"],
            [f"{BUCKET_URL}/shared.jpg"],
        )

    def test_video_replace_and_clear(self):
        created = self._create(video="old.mp4").json()
        replaced = self.client.put(
            f"/api/projects/{created['id']}",
            files=[("video", ("new.mp4", b"v", "video/mp4"))],
            headers=self.headers,
        ).json()
        self.assertEqual(replaced["video"], f"{BUCKET_URL}/new.mp4")
        self.assertNotIn("old.mp4", support.storage().objects)

        cleared = self.client.put(
            f"/api/projects/{created['id']}",
            data={"clearVideo": "true"},
            headers=self.headers,
        ).json()
        self.assertIsNone(cleared["video"])
        self.assertNotIn("new.mp4", support.storage().objects)

    def test_delete_releases_every_asset(self):
        created = self._create(images=("a.jpg", "b.jpg"), video="clip.mp4").json()
        response = self.client.delete(f"/api/projects/{created['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Project deleted successfully"})
        self.assertEqual(support.storage().count("remove"), 3)
        self.assertEqual(support.storage().objects, {})
        self.assertEqual(self.client.get(f"/api/projects/{created['id']}").status_code, 404)

    def test_delete_keeps_record_when_storage_fails(self):
        created = self._create(images=("a.jpg",)).json()
        support.storage().fail_remove_keys.add("a.jpg")
        response = self.client.delete(f"/api/projects/{created['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(self.client.get(f"/api/projects/{created['id']}").status_code, 200)

    def test_unknown_project(self):
        response = self.client.put(
            "/api/projects/missing", data={"title": "x"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Project not found"})


class PartnerApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()
        self.headers = support.admin_headers()

    def _create(self, filename="face.jpg"):
        files = [("image", image(filename))] if filename else []
        return self.client.post(
            "/api/partners",
            data={"fullName": "Jane Doe", "quote": "Great", "description": "Architect"},
            files=files,
            headers=self.headers,
        )

    def test_image_is_required(self):
        response = self._create(filename=None)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Image is required"})

    def test_edit_replaces_image(self):
        created = self._create().json()
        self.assertEqual(created["imageUrl"], f"{BUCKET_URL}/face.jpg")

        response = self.client.put(
            f"/api/partners/editPartner/{created['id']}",
            data={"quote": "Even better"},
            files=[("image", image("portrait.png", content_type="image/png"))],
            headers=self.headers,
        )
        body = response.json()
        self.assertEqual(body["quote"], "Even better")
        self.assertEqual(body["fullName"], "Jane Doe")
        self.assertEqual(body["imageUrl"], f"{BUCKET_URL}/portrait.png")
        self.assertNotIn("face.jpg", support.storage().objects)

    def test_failed_image_upload_keeps_old_reference(self):
        created = self._create().json()
        support.storage().fail_store_keys.add("portrait.png")
        response = self.client.put(
            f"/api/partners/{created['id']}",
            files=[("image", image("portrait.png"))],
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 500)
        stored = self.client.get(f"/api/partners/{created['id']}").json()
        self.assertEqual(stored["imageUrl"], created["imageUrl"])

    def test_delete_removes_image(self):
        created = self._create().json()
        response = self.client.delete(f"/api/partners/{created['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("face.jpg", support.storage().objects)
        self.assertEqual(self.client.get("/api/partners").json(), [])


class StatAndBoxApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()
        self.headers = support.admin_headers()

    def test_stat_crud(self):
        created = self.client.post(
            "/api/stats/addStats",
            json={"title": "Projects", "description": "120+"},
            headers=self.headers,
        )
        self.assertEqual(created.status_code, 201)
        stat_id = created.json()["id"]

        updated = self.client.put(
            f"/api/stats/editStat/{stat_id}",
            json={"description": "150+"},
            headers=self.headers,
        ).json()
        self.assertEqual(updated, {"id": stat_id, "title": "Projects", "description": "150+"})

        self.assertEqual(len(self.client.get("/api/stats/getStats").json()), 1)
        deleted = self.client.delete(f"/api/stats/deleteStat/{stat_id}", headers=self.headers)
        self.assertEqual(deleted.json(), {"message": "Stat deleted successfully"})
        missing = self.client.delete(f"/api/stats/{stat_id}", headers=self.headers)
        self.assertEqual(missing.status_code, 404)

    def test_stat_validation(self):
        response = self.client.post("/api/stats", json={"title": "x"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("message", response.json())

    def test_box_singleton(self):
        self.assertEqual(self.client.get("/api/box/getBoxDescription").status_code, 404)
        missing = self.client.put(
            "/api/box/updateBoxDescription", json={"description": "x"}, headers=self.headers
        )
        self.assertEqual(missing.status_code, 404)

        created = self.client.post(
            "/api/box/addBoxDescription", json={"description": "We build."}, headers=self.headers
        )
        self.assertEqual(created.status_code, 201)
        duplicate = self.client.post(
            "/api/box/addBoxDescription", json={"description": "Again"}, headers=self.headers
        )
        self.assertEqual(duplicate.status_code, 400)

        updated = self.client.put(
            "/api/box/updateBoxDescription",
            json={"description": "We design."},
            headers=self.headers,
        )
        self.assertEqual(updated.json()["id"], created.json()["id"])
        self.assertEqual(
            self.client.get("/api/box/getBoxDescription").json()["description"], "We design."
        )


class AdminApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()

    def _add(self, email="owner@example.com"):
        return self.client.post(
            "/api/admin/addAdmin",
            json={"name": "Owner", "email": email, "password": "pw"},
        )

    def test_add_rejects_duplicate_email(self):
        self.assertEqual(self._add().status_code, 201)
        duplicate = self._add(email="Owner@Example.com")
        self.assertEqual(duplicate.status_code, 400)
        self.assertEqual(duplicate.json(), {"message": "Admin with this email already exists"})

    def test_add_requires_all_fields(self):
        response = self.client.post("/api/admin/addAdmin", json={"name": "x"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "All fields are required"})

    def test_password_is_hashed_and_never_returned(self):
        self._add()
        stored = support.store().find_one("admin")
        self.assertNotEqual(stored["password"], "pw")

        login = self.client.post(
            "/api/admin/loginAdmin", json={"email": "owner@example.com", "password": "pw"}
        ).json()
        admins = self.client.get(
            "/api/admin/getAdmin",
            headers={"authorization": f"Bearer {login['accessToken']}"},
        ).json()
        self.assertEqual(len(admins), 1)
        self.assertNotIn("password", admins[0])

    def test_login_tokens_unlock_write_routes(self):
        self._add()
        login = self.client.post(
            "/api/admin/loginAdmin", json={"username": "owner@example.com", "password": "pw"}
        )
        self.assertEqual(login.status_code, 200)
        token = login.json()["accessToken"]
        response = self.client.post(
            "/api/stats",
            json={"title": "t", "description": "d"},
            headers={"authorization": f"Bearer {token}"},
        )
        self.assertEqual(response.status_code, 201)

    def test_login_rejects_bad_password(self):
        self._add()
        response = self.client.post(
            "/api/admin/loginAdmin", json={"email": "owner@example.com", "password": "nope"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Invalid credentials"})

    def test_delete_admin(self):
        self._add()
        admin_id = support.store().find_one("admin")["id"]
        headers = support.admin_headers()
        self.assertEqual(
            self.client.delete(f"/api/admin/{admin_id}", headers=headers).status_code, 200
        )
        self.assertEqual(
            self.client.delete(f"/api/admin/{admin_id}", headers=headers).status_code, 404
        )


class EmailApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()
        self.payload = {
            "senderEmail": "someone@gmail.com",
            "senderPassword": "app-password",
            "subject": "Hello",
            "message": "We'd like a quote.",
        }

    def test_send_email_to_configured_recipient(self):
        response = self.client.post("/api/email/send-email", json=self.payload)
        self.assertEqual(response.status_code, 200)
        sent = support.mailer().sent
        self.assertEqual(len(sent), 1)
        self.assertEqual(sent[0].recipient, "studio@example.com")

    def test_unsupported_provider(self):
        self.payload["senderEmail"] = "someone@yahoo.com"
        response = self.client.post("/api/email/send-email", json=self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Unsupported email provider"})

    def test_relay_failure(self):
        support.mailer().fail = True
        response = self.client.post("/api/email/send-email", json=self.payload)
        self.assertEqual(response.status_code, 500)


class MediaApiTests(unittest.TestCase):
    def setUp(self):
        self.client = support.make_client()
        self.headers = support.admin_headers()

    def test_upload_and_list_images(self):
        response = self.client.post(
            "/api/image/uploadFile", files={"file": image("hero.png", content_type="image/png")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        support.storage().objects["clip.mp4"] = b"v"

        listed = self.client.get("/api/image/getAllImages").json()
        self.assertEqual(listed["images"], [f"{BUCKET_URL}/hero.png"])

    def test_image_type_is_checked(self):
        response = self.client.post(
            "/api/image/uploadFile",
            files={"file": ("notes.txt", b"x", "text/plain")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_image_requires_key_and_is_idempotent(self):
        self.assertEqual(
            self.client.delete("/api/image/deleteFile", headers=self.headers).status_code, 400
        )
        for _ in range(2):
            response = self.client.delete(
                "/api/image/deleteFile", params={"key": "gone.jpg"}, headers=self.headers
            )
            self.assertEqual(response.status_code, 200)

    def test_update_image_overwrites_key(self):
        support.storage().objects["hero.png"] = b"old"
        response = self.client.put(
            "/api/image/updateFile",
            params={"key": "hero.png"},
            files={"file": image("whatever.png", b"new", "image/png")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(support.storage().objects["hero.png"], b"new")

    def test_delete_video_probes_first(self):
        missing = self.client.delete(
            "/api/video/deleteVideo", params={"key": "clip.mp4"}, headers=self.headers
        )
        self.assertEqual(missing.status_code, 404)

        self.client.post(
            "/api/video/uploadVideo",
            files={"file": ("clip.mp4", b"v", "video/mp4")},
            headers=self.headers,
        )
        response = self.client.delete(
            "/api/video/deleteVideo", params={"key": "clip.mp4"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(support.storage().exists("clip.mp4"))


if __name__ == "__main__":
    unittest.main()
